from django.conf import settings


def salon(request):
    return {
        "salon_name": settings.SALON_NAME,
        "salon_phone": settings.SALON_PHONE,
        "whatsapp_url": f"https://wa.me/{settings.SALON_WHATSAPP_NUMBER}",
        "admin_session": getattr(request, "admin_session", None),
    }
