from django import forms
from django.core.validators import FileExtensionValidator

from website.constants import PRICE_CATEGORIES, STYLE_CATEGORIES

IMAGE_EXTENSIONS = ["jpg", "jpeg", "png", "webp", "gif", "heic"]


class AdminAuthForm(forms.Form):
    email = forms.EmailField(
        error_messages={"invalid": "Please enter a valid email"},
        widget=forms.EmailInput(attrs={"class": "form-control", "placeholder": "your@email.com"}),
    )
    password = forms.CharField(
        min_length=6,
        error_messages={"min_length": "Password must be at least 6 characters"},
        widget=forms.PasswordInput(attrs={"class": "form-control"}),
    )
    remember = forms.BooleanField(required=False)


class GalleryStyleForm(forms.Form):
    title = forms.CharField(max_length=120, widget=forms.TextInput(attrs={"class": "form-control"}))
    category = forms.ChoiceField(
        choices=[("", "Select category")] + [(c, c) for c in STYLE_CATEGORIES],
        widget=forms.Select(attrs={"class": "form-control"}),
    )
    description = forms.CharField(required=False, widget=forms.Textarea(attrs={"class": "form-control", "rows": 2}))
    image = forms.FileField(
        validators=[FileExtensionValidator(IMAGE_EXTENSIONS)],
        widget=forms.ClearableFileInput(attrs={"class": "form-control", "accept": "image/*"}))

    def to_row(self) -> dict:
        cleaned = self.cleaned_data
        return {
            "title": cleaned["title"],
            "category": cleaned["category"],
            "description": cleaned.get("description") or None,
        }


class PriceItemForm(forms.Form):
    service_name = forms.CharField(max_length=120, widget=forms.TextInput(attrs={"class": "form-control"}))
    category = forms.ChoiceField(
        choices=[(c, c) for c in PRICE_CATEGORIES],
        widget=forms.Select(attrs={"class": "form-control"}),
    )
    price = forms.DecimalField(
        min_value=0, max_digits=10, decimal_places=2,
        widget=forms.NumberInput(attrs={"class": "form-control", "step": "0.01"}),
    )
    duration = forms.CharField(required=False, max_length=60, widget=forms.TextInput(attrs={"class": "form-control"}))
    description = forms.CharField(required=False, widget=forms.TextInput(attrs={"class": "form-control"}))
    is_active = forms.BooleanField(required=False, initial=True)

    def to_row(self) -> dict:
        cleaned = self.cleaned_data
        return {
            "service_name": cleaned["service_name"],
            "category": cleaned["category"],
            "price": float(cleaned["price"]),
            "duration": cleaned.get("duration") or None,
            "description": cleaned.get("description") or None,
            "is_active": cleaned.get("is_active", False),
        }


class MultipleFileInput(forms.ClearableFileInput):
    allow_multiple_selected = True


class MultipleImageField(forms.FileField):
    def __init__(self, *args, **kwargs):
        kwargs.setdefault("validators", [FileExtensionValidator(IMAGE_EXTENSIONS)])
        kwargs.setdefault("widget", MultipleFileInput(attrs={"class": "form-control", "accept": "image/*"}))
        super().__init__(*args, **kwargs)

    def clean(self, data, initial=None):
        single_file_clean = super().clean
        if isinstance(data, (list, tuple)):
            return [single_file_clean(d, initial) for d in data]
        if data:
            return [single_file_clean(data, initial)]
        return []


class CustomerRecordForm(forms.Form):
    customer_name = forms.CharField(max_length=120, widget=forms.TextInput(attrs={"class": "form-control"}))
    customer_phone = forms.CharField(required=False, max_length=40, widget=forms.TextInput(attrs={"class": "form-control"}))
    style_done = forms.CharField(max_length=120, widget=forms.TextInput(attrs={"class": "form-control"}))
    appointment_date = forms.DateField(widget=forms.DateInput(attrs={"type": "date", "class": "form-control"}))
    notes = forms.CharField(required=False, widget=forms.Textarea(attrs={"class": "form-control", "rows": 3}))
    photos = MultipleImageField(required=False)

    def to_row(self) -> dict:
        cleaned = self.cleaned_data
        return {
            "customer_name": cleaned["customer_name"],
            "customer_phone": cleaned.get("customer_phone") or None,
            "style_done": cleaned["style_done"],
            "appointment_date": cleaned["appointment_date"].isoformat(),
            "notes": cleaned.get("notes") or None,
        }
