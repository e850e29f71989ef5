from django import forms
from django.utils import timezone

from .constants import APPOINTMENT_SERVICES, TIME_SLOTS


class BookingForm(forms.Form):
    """
    Public booking request.
    Rows are always created as PENDING; an admin confirms them later.
    """

    customer_name = forms.CharField(
        label="Your Name",
        max_length=120,
        widget=forms.TextInput(attrs={"class": "form-control", "placeholder": "Enter your full name"}),
    )
    customer_phone = forms.CharField(
        label="Phone Number (WhatsApp)",
        max_length=40,
        widget=forms.TextInput(attrs={"class": "form-control", "type": "tel", "placeholder": "e.g., 0801 234 5678"}),
    )
    customer_email = forms.EmailField(
        label="Email (Optional)",
        required=False,
        widget=forms.EmailInput(attrs={"class": "form-control"}),
    )
    service_type = forms.ChoiceField(
        label="Hair Service",
        choices=[("", "Select a service")] + [(s, s) for s in APPOINTMENT_SERVICES],
        widget=forms.Select(attrs={"class": "form-control"}),
    )
    preferred_date = forms.DateField(
        label="Preferred Date",
        widget=forms.DateInput(attrs={"type": "date", "class": "form-control"}),
    )
    preferred_time = forms.ChoiceField(
        label="Preferred Time",
        choices=[("", "Select time")] + [(t, t) for t in TIME_SLOTS],
        widget=forms.Select(attrs={"class": "form-control"}),
    )
    notes = forms.CharField(
        label="Additional Notes (Optional)",
        required=False,
        widget=forms.Textarea(attrs={
            "class": "form-control",
            "rows": 3,
            "placeholder": "Any special requests or information we should know?",
        }),
    )

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["preferred_date"].widget.attrs["min"] = timezone.localdate().isoformat()

    def clean_preferred_date(self):
        value = self.cleaned_data["preferred_date"]
        if value < timezone.localdate():
            raise forms.ValidationError("Please choose today or a later date.")
        return value

    def to_row(self) -> dict:
        """Payload for the appointments table (status is added by the service)."""
        cleaned = self.cleaned_data
        return {
            "customer_name": cleaned["customer_name"],
            "customer_phone": cleaned["customer_phone"],
            "customer_email": cleaned.get("customer_email") or None,
            "service_type": cleaned["service_type"],
            "preferred_date": cleaned["preferred_date"].isoformat(),
            "preferred_time": cleaned["preferred_time"],
            "notes": cleaned.get("notes") or None,
        }


class TrackAppointmentForm(forms.Form):
    phone = forms.CharField(
        label="Phone Number",
        max_length=40,
        widget=forms.TextInput(attrs={"class": "form-control", "type": "tel", "placeholder": "Enter your phone number"}),
    )


class ContactForm(forms.Form):
    name = forms.CharField(max_length=120, widget=forms.TextInput(attrs={"class": "form-control"}))
    email = forms.EmailField(widget=forms.EmailInput(attrs={"class": "form-control"}))
    subject = forms.CharField(max_length=150, widget=forms.TextInput(attrs={"class": "form-control"}))
    message = forms.CharField(widget=forms.Textarea(attrs={"class": "form-control", "rows": 5}))
