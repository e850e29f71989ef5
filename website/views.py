import logging
from itertools import groupby
from smtplib import SMTPException

from django.conf import settings
from django.contrib import messages
from django.core.mail import send_mail
from django.shortcuts import render
from django.utils import timezone

from .constants import STYLE_CATEGORIES
from .exceptions import DataServiceError
from .forms import BookingForm, ContactForm, TrackAppointmentForm

logger = logging.getLogger(__name__)


def home(request):
    try:
        featured = request.data_service.list_gallery_styles(featured_only=True)[:6]
    except DataServiceError:
        featured = []
    return render(request, 'home.html', {"featured_styles": featured})


def about(request):
    return render(request, 'pages/about.html', {})


def styles(request):
    category = request.GET.get("category") or "All"
    gallery = []
    try:
        gallery = request.data_service.list_gallery_styles()
    except DataServiceError:
        messages.error(request, "We could not load the gallery right now. Please try again later.")

    if category != "All":
        gallery = [s for s in gallery if s.category == category]

    return render(request, 'pages/styles.html', {
        "styles": gallery,
        "categories": ["All"] + STYLE_CATEGORIES,
        "active_category": category,
    })


def prices(request):
    groups = []
    try:
        items = request.data_service.list_prices(active_only=True)
        # rows arrive ordered by category, then service name
        groups = [(category, list(rows)) for category, rows in groupby(items, key=lambda p: p.category)]
    except DataServiceError:
        messages.error(request, "We could not load the price list right now. Please try again later.")
    return render(request, 'pages/prices.html', {"price_groups": groups})


def contact(request):
    if request.method == "POST":
        form = ContactForm(request.POST)
        if form.is_valid():
            cleaned = form.cleaned_data
            try:
                send_mail(
                    cleaned["subject"],
                    f"{cleaned['message']}\n\n-- {cleaned['name']} <{cleaned['email']}>",
                    settings.DEFAULT_FROM_EMAIL,
                    [settings.SALON_CONTACT_EMAIL],
                )
            except (SMTPException, OSError) as e:
                logger.error("Contact message from %s could not be sent: %s", cleaned["email"], e)
                messages.error(request, "We could not send your message right now. Please try again or reach us on WhatsApp.")
            else:
                logger.info("Contact message received from %s", cleaned["email"])
                return render(request, 'pages/contact.html', {
                    "form": ContactForm(),
                    "message_name": cleaned["name"],
                })
        else:
            messages.error(request, "Please correct the errors below.")
    else:
        form = ContactForm()
    return render(request, 'pages/contact.html', {"form": form})


def book(request):
    if request.method == "POST":
        form = BookingForm(request.POST)
        if form.is_valid():
            try:
                appointment = request.data_service.create_appointment(form.to_row())
            except DataServiceError:
                messages.error(request, "We could not send your booking request. Please try again.")
            else:
                messages.success(request, "Booking request submitted successfully!")
                return render(request, "pages/booking_success.html", {"appointment": appointment})
        else:
            messages.error(request, "Please fill in all required fields.")
    else:
        form = BookingForm()

    return render(request, "pages/book.html", {"form": form})


def track_appointment(request):
    form = TrackAppointmentForm(request.GET or None)
    appointments = []
    searched = False

    if form.is_bound and form.is_valid():
        searched = True
        try:
            appointments = request.data_service.find_appointments_by_phone(form.cleaned_data["phone"])
        except DataServiceError:
            messages.error(request, "We could not look up your appointments. Please try again.")

    today = timezone.localdate()
    rows = [
        {
            "appointment": a,
            "is_past": bool(a.preferred_day and a.preferred_day < today),
        }
        for a in appointments
    ]
    return render(request, "pages/track.html", {
        "form": form,
        "searched": searched,
        "rows": rows,
    })


def not_found(request, exception=None):
    return render(request, "404.html", {"path": request.path}, status=404)
