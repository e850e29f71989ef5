import logging

from django.conf import settings
from django.contrib import messages
from django.http import JsonResponse
from django.shortcuts import render, redirect
from django.urls import reverse
from django.utils import timezone
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import require_POST

from website.exceptions import (
    AppointmentNotFound,
    AuthenticationFailed,
    DataServiceError,
    InvalidStatusTransition,
    PhotoUploadError,
)
from website.models import Appointment
from dashboard.decorators import admin_required
from dashboard.forms import AdminAuthForm, CustomerRecordForm, GalleryStyleForm, PriceItemForm
from dashboard.services import (
    AppointmentBoard,
    publish_gallery_style,
    search_customer_records,
    store_customer_record,
)
from dashboard.utils.calendar_utils import (
    STATUS_FILTERS,
    build_appointment_calendar,
    calendar_as_json,
    filter_by_status,
    pending_count,
)
from dashboard.utils.time_utils import parse_month

logger = logging.getLogger(__name__)

# button -> target status
STATUS_ACTIONS = {
    "confirm": Appointment.STATUS_CONFIRMED,
    "cancel": Appointment.STATUS_CANCELLED,
    "complete": Appointment.STATUS_COMPLETED,
}

ADMIN_ACTIONS = [
    {"title": "Upload Styles", "description": "Add new hairstyle photos to your gallery", "url": "dashboard:gallery"},
    {"title": "Manage Prices", "description": "Update your service prices", "url": "dashboard:prices"},
    {"title": "Appointments", "description": "View and manage booking requests", "url": "dashboard:appointments"},
    {"title": "Customer Records", "description": "Track customer styles and notes", "url": "dashboard:customers"},
]


def login_view(request):
    admin = request.admin_session
    if admin and admin.is_admin:
        return redirect(settings.LOGIN_REDIRECT_URL)
    if admin:
        return render(request, "dashboard/pages/access_denied.html", {"email": admin.email}, status=403)

    signup = request.GET.get("mode") == "signup"
    form = AdminAuthForm(request.POST or None)

    if request.method == "POST":
        if not form.is_valid():
            first_error = next(iter(form.errors.values()))[0]
            messages.error(request, first_error)
        elif signup:
            try:
                request.data_service.sign_up(form.cleaned_data["email"], form.cleaned_data["password"])
            except AuthenticationFailed as e:
                messages.error(request, str(e))
            except DataServiceError:
                messages.error(request, "Something went wrong. Please try again.")
            else:
                messages.success(request, "Account created! Contact the salon owner to get admin access.")
                return redirect("dashboard:login")
        else:
            try:
                admin = request.data_service.sign_in(form.cleaned_data["email"], form.cleaned_data["password"])
            except AuthenticationFailed:
                messages.error(request, "Invalid email or password")
            except DataServiceError:
                messages.error(request, "Something went wrong. Please try again.")
            else:
                admin.store(request.session)
                # 2 weeks if checked; session-only if not
                request.session.set_expiry(1209600 if form.cleaned_data.get("remember") else 0)
                logger.info("%s signed in (admin=%s)", admin.email, admin.is_admin)
                if not admin.is_admin:
                    return render(request, "dashboard/pages/access_denied.html", {"email": admin.email}, status=403)
                return redirect(settings.LOGIN_REDIRECT_URL)

    return render(request, "dashboard/pages/login.html", {"form": form, "signup": signup})


@require_POST
def logout_view(request):
    admin = request.admin_session
    if admin:
        try:
            request.data_service.for_session(admin).sign_out()
        except AuthenticationFailed:
            logger.info("Session for %s already expired at sign out", admin.email)
    request.session.flush()
    return redirect("dashboard:login")


@admin_required
def index(request):
    try:
        pending = pending_count(request.admin_service.list_appointments())
    except DataServiceError:
        pending = None
        messages.error(request, "Failed to load appointments")

    return render(request, "dashboard/index.html", {
        "actions": ADMIN_ACTIONS,
        "pending_count": pending,
        "active_page": "home",
    })


@admin_required
def appointments(request):
    # ---- Handle actions from buttons (Confirm / Cancel / Complete) ----
    if request.method == "POST":
        appt_id = request.POST.get("appointment_id", "")
        target = STATUS_ACTIONS.get(request.POST.get("action"))
        back = request.POST.get("next") or reverse("dashboard:appointments")
        if not url_has_allowed_host_and_scheme(back, allowed_hosts={request.get_host()}):
            back = reverse("dashboard:appointments")

        if target is None:
            messages.error(request, "Unknown action.")
            return redirect(back)

        try:
            board = AppointmentBoard.load(request.admin_service)
            updated = board.change_status(appt_id, target)
        except AppointmentNotFound:
            messages.error(request, "That appointment no longer exists.")
        except InvalidStatusTransition as e:
            messages.error(request, str(e))
        except DataServiceError:
            messages.error(request, "Update failed")
        else:
            messages.success(request, f"Appointment marked as {updated.status}")
        return redirect(back)

    view_mode = request.GET.get("view", "list")
    if view_mode not in {"list", "calendar"}:
        view_mode = "list"
    status_filter = request.GET.get("status", "all")
    if status_filter not in STATUS_FILTERS:
        status_filter = "all"

    try:
        board = AppointmentBoard.load(request.admin_service)
        items = board.appointments
    except DataServiceError:
        messages.error(request, "Failed to load appointments")
        items = []

    ctx = {
        "view_mode": view_mode,
        "status_filter": status_filter,
        "status_filters": STATUS_FILTERS,
        "pending_count": pending_count(items),
        "active_page": "appointments",
        "next_url": request.get_full_path(),
    }
    if view_mode == "calendar":
        today = timezone.localdate()
        base = parse_month(request.GET.get("month")) or today
        ctx["calendar"] = build_appointment_calendar(items, base, today)
    else:
        ctx["appointments"] = filter_by_status(items, status_filter)

    return render(request, "dashboard/pages/appointments.html", ctx)


@admin_required
def calendar_data(request):
    today = timezone.localdate()
    base = parse_month(request.GET.get("month")) or today
    try:
        board = AppointmentBoard.load(request.admin_service)
    except DataServiceError:
        return JsonResponse({"error": "Failed to load appointments"}, status=502)
    return JsonResponse(calendar_as_json(build_appointment_calendar(board.appointments, base, today)))


@admin_required
def gallery(request):
    service = request.admin_service
    form = GalleryStyleForm()

    if request.method == "POST":
        action = request.POST.get("action", "upload")
        if action == "upload":
            form = GalleryStyleForm(request.POST, request.FILES)
            if form.is_valid():
                try:
                    publish_gallery_style(service, form.to_row(), form.cleaned_data["image"])
                except DataServiceError:
                    messages.error(request, "Failed to upload style. Please try again.")
                else:
                    messages.success(request, "Style uploaded successfully")
                    return redirect("dashboard:gallery")
            else:
                messages.error(request, "Please fill in all required fields and select an image")
        else:
            style_id = request.POST.get("style_id", "")
            try:
                if action == "feature":
                    featured = request.POST.get("featured") == "1"
                    service.set_featured(style_id, featured)
                    messages.success(request, "Added to featured" if featured else "Removed from featured")
                elif action == "delete":
                    style = service.get_gallery_style(style_id)
                    if style is not None:
                        service.delete_gallery_style(style)
                    messages.success(request, "Style removed from gallery")
                else:
                    messages.error(request, "Unknown action.")
            except DataServiceError:
                messages.error(request, "Update failed")
            return redirect("dashboard:gallery")

    try:
        styles = service.list_gallery_styles()
    except DataServiceError:
        messages.error(request, "Failed to load gallery styles")
        styles = []

    return render(request, "dashboard/pages/gallery.html", {
        "form": form,
        "styles": styles,
        "active_page": "gallery",
    })


@admin_required
def prices(request):
    service = request.admin_service
    form = PriceItemForm(initial={"is_active": True})

    if request.method == "POST":
        action = request.POST.get("action", "add")
        price_id = request.POST.get("price_id", "")
        try:
            if action == "add":
                form = PriceItemForm(request.POST)
                if form.is_valid():
                    service.create_price(form.to_row())
                    messages.success(request, "Price added successfully")
                    return redirect("dashboard:prices")
                messages.error(request, "Please fill in service name, category, and price")
            elif action == "update":
                edit_form = PriceItemForm(request.POST)
                if edit_form.is_valid():
                    service.update_price(price_id, edit_form.to_row())
                    messages.success(request, "Price updated successfully")
                else:
                    messages.error(request, "Please fill in service name, category, and price")
                return redirect("dashboard:prices")
            elif action == "toggle":
                service.update_price(price_id, {"is_active": request.POST.get("is_active") == "1"})
                return redirect("dashboard:prices")
            elif action == "delete":
                service.delete_price(price_id)
                messages.success(request, "Price removed")
                return redirect("dashboard:prices")
            else:
                messages.error(request, "Unknown action.")
        except DataServiceError:
            messages.error(request, "Update failed")
            return redirect("dashboard:prices")

    try:
        items = service.list_prices()
    except DataServiceError:
        messages.error(request, "Failed to load prices")
        items = []

    return render(request, "dashboard/pages/prices.html", {
        "form": form,
        "prices": items,
        "active_page": "prices",
    })


@admin_required
def customers(request):
    service = request.admin_service
    form = CustomerRecordForm()
    q = request.GET.get("q", "").strip()

    if request.method == "POST":
        action = request.POST.get("action", "add")
        if action == "add":
            form = CustomerRecordForm(request.POST, request.FILES)
            if form.is_valid():
                try:
                    store_customer_record(service, form.to_row(), form.cleaned_data["photos"])
                except PhotoUploadError as e:
                    messages.error(request, f"Photo {e.filename} could not be uploaded; nothing was saved.")
                except DataServiceError:
                    messages.error(request, "Failed to add. Please try again")
                else:
                    messages.success(request, "Customer record added")
                    return redirect("dashboard:customers")
            else:
                messages.error(request, "Please fill in customer name, style, and date")
        elif action == "delete":
            try:
                record = service.get_customer_record(request.POST.get("record_id", ""))
                if record is not None:
                    service.delete_customer_record(record)
                messages.success(request, "Customer record removed")
            except DataServiceError:
                messages.error(request, "Delete failed")
            return redirect("dashboard:customers")

    try:
        records = search_customer_records(service.list_customer_records(), q)
    except DataServiceError:
        messages.error(request, "Failed to load customer records")
        records = []

    return render(request, "dashboard/pages/customers.html", {
        "form": form,
        "records": records,
        "q": q,
        "show_form": request.method == "POST",
        "active_page": "customers",
    })
