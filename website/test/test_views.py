from datetime import timedelta
from decimal import Decimal
from unittest import mock

from django.core import mail
from django.test import SimpleTestCase, override_settings
from django.urls import reverse
from django.utils import timezone

from website.exceptions import DataServiceError
from website.models import Appointment, GalleryStyle, PriceItem


def make_appointment(**overrides):
    fields = {
        "id": "a1",
        "customer_name": "Ada Obi",
        "customer_phone": "08011112222",
        "service_type": "Box Braids",
        "preferred_date": "2026-02-18",
        "preferred_time": "10:00 AM",
        "status": Appointment.STATUS_PENDING,
    }
    fields.update(overrides)
    return Appointment(**fields)


class PublicViewTestCase(SimpleTestCase):
    """Runs every request against a mocked Supabase service."""

    def setUp(self):
        self.service = mock.MagicMock()
        patcher = mock.patch("website.middleware.get_data_service", return_value=self.service)
        patcher.start()
        self.addCleanup(patcher.stop)


class BookingViewTests(PublicViewTestCase):
    def booking_data(self, **overrides):
        data = {
            "customer_name": "Ada Obi",
            "customer_phone": "08011112222",
            "customer_email": "",
            "service_type": "Box Braids",
            "preferred_date": (timezone.localdate() + timedelta(days=3)).isoformat(),
            "preferred_time": "10:00 AM",
            "notes": "",
        }
        data.update(overrides)
        return data

    def test_form_renders(self):
        response = self.client.get(reverse("book"))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Box Braids")
        self.assertContains(response, "9:00 AM")

    def test_valid_booking_is_sent_to_supabase(self):
        print("\n[TEST] a valid booking request creates one pending appointment")
        data = self.booking_data()
        self.service.create_appointment.return_value = make_appointment(preferred_date=data["preferred_date"])

        response = self.client.post(reverse("book"), data)

        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, "pages/booking_success.html")
        row = self.service.create_appointment.call_args.args[0]
        print("  - row sent:", row)
        self.assertEqual(row["preferred_date"], data["preferred_date"])
        self.assertIsNone(row["customer_email"])
        self.assertNotIn("status", row)

    def test_past_date_is_rejected(self):
        print("\n[TEST] booking in the past is blocked")
        data = self.booking_data(preferred_date=(timezone.localdate() - timedelta(days=1)).isoformat())

        response = self.client.post(reverse("book"), data)

        self.assertTemplateUsed(response, "pages/book.html")
        self.assertContains(response, "Please choose today or a later date.")
        self.service.create_appointment.assert_not_called()

    def test_unknown_time_slot_is_rejected(self):
        response = self.client.post(reverse("book"), self.booking_data(preferred_time="11:30 PM"))
        self.assertTemplateUsed(response, "pages/book.html")
        self.service.create_appointment.assert_not_called()

    def test_service_failure_keeps_the_form(self):
        self.service.create_appointment.side_effect = DataServiceError("create appointment", "timeout")

        response = self.client.post(reverse("book"), self.booking_data(customer_name="Kemi"))

        self.assertTemplateUsed(response, "pages/book.html")
        self.assertContains(response, "We could not send your booking request")
        self.assertContains(response, 'value="Kemi"')


class TrackAppointmentViewTests(PublicViewTestCase):
    def test_empty_page_does_not_query(self):
        response = self.client.get(reverse("track_appointment"))
        self.assertEqual(response.status_code, 200)
        self.service.find_appointments_by_phone.assert_not_called()

    def test_phone_is_trimmed_before_lookup(self):
        print("\n[TEST] tracking trims the phone number and nothing more")
        self.service.find_appointments_by_phone.return_value = [make_appointment()]

        response = self.client.get(reverse("track_appointment"), {"phone": "  08011112222 "})

        self.service.find_appointments_by_phone.assert_called_once_with("08011112222")
        self.assertContains(response, "Your Appointments (1)")
        self.assertContains(response, "Pending Confirmation")

    def test_no_match(self):
        self.service.find_appointments_by_phone.return_value = []
        response = self.client.get(reverse("track_appointment"), {"phone": "08099999999"})
        self.assertContains(response, "No appointments found for this phone number.")

    def test_past_appointments_are_flagged(self):
        yesterday = (timezone.localdate() - timedelta(days=1)).isoformat()
        tomorrow = (timezone.localdate() + timedelta(days=1)).isoformat()
        self.service.find_appointments_by_phone.return_value = [
            make_appointment(id="b", preferred_date=tomorrow),
            make_appointment(id="a", preferred_date=yesterday),
        ]

        response = self.client.get(reverse("track_appointment"), {"phone": "08011112222"})

        flags = [row["is_past"] for row in response.context["rows"]]
        self.assertEqual(flags, [False, True])


class CatalogueViewTests(PublicViewTestCase):
    def test_prices_are_grouped_by_category(self):
        self.service.list_prices.return_value = [
            PriceItem("1", "Box Braids", "Braids", Decimal("25000")),
            PriceItem("2", "Cornrows", "Braids", Decimal("8000")),
            PriceItem("3", "Deep Conditioning", "Treatments", Decimal("5000")),
        ]

        response = self.client.get(reverse("prices"))

        self.service.list_prices.assert_called_once_with(active_only=True)
        groups = response.context["price_groups"]
        self.assertEqual([c for c, _ in groups], ["Braids", "Treatments"])
        self.assertEqual(len(groups[0][1]), 2)
        self.assertContains(response, "Deep Conditioning")

    def test_styles_filter_by_category(self):
        self.service.list_gallery_styles.return_value = [
            GalleryStyle("1", "Goddess Braids", "Braids", "https://img/1.jpg"),
            GalleryStyle("2", "Frontal Wig", "Weaves & Wigs", "https://img/2.jpg"),
        ]

        response = self.client.get(reverse("styles"), {"category": "Braids"})

        self.assertEqual([s.title for s in response.context["styles"]], ["Goddess Braids"])
        self.assertEqual(response.context["active_category"], "Braids")

    def test_gallery_failure_shows_message(self):
        self.service.list_gallery_styles.side_effect = DataServiceError("list gallery styles", "down")
        response = self.client.get(reverse("styles"))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "We could not load the gallery right now.")

    def test_home_shows_featured_styles(self):
        self.service.list_gallery_styles.return_value = [
            GalleryStyle("1", "Goddess Braids", "Braids", "https://img/1.jpg", is_featured=True),
        ]
        response = self.client.get(reverse("home"))
        self.service.list_gallery_styles.assert_called_once_with(featured_only=True)
        self.assertContains(response, "Goddess Braids")


class ContactViewTests(PublicViewTestCase):
    @override_settings(EMAIL_BACKEND="django.core.mail.backends.locmem.EmailBackend",
                       SALON_CONTACT_EMAIL="owner@salon.test")
    def test_message_is_emailed_to_the_salon(self):
        response = self.client.post(reverse("contact"), {
            "name": "Ngozi",
            "email": "ngozi@test.com",
            "subject": "Bridal trial",
            "message": "Do you do trials on weekends?",
        })

        self.assertContains(response, "Thanks Ngozi!")
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ["owner@salon.test"])
        self.assertIn("ngozi@test.com", mail.outbox[0].body)

    @override_settings(SALON_CONTACT_EMAIL="owner@salon.test")
    def test_mail_failure_keeps_the_form(self):
        print("\n[TEST] SMTP refusing the message does not break the contact page")
        with mock.patch("website.views.send_mail", side_effect=ConnectionRefusedError("smtp down")):
            response = self.client.post(reverse("contact"), {
                "name": "Ngozi",
                "email": "ngozi@test.com",
                "subject": "Bridal trial",
                "message": "Do you do trials on weekends?",
            })

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "We could not send your message right now.")
        self.assertNotContains(response, "Thanks Ngozi!")
        self.assertContains(response, 'value="Bridal trial"')


class NotFoundTests(PublicViewTestCase):
    def test_unknown_page(self):
        response = self.client.get("/no-such-page/")
        self.assertEqual(response.status_code, 404)
        self.assertTemplateUsed(response, "404.html")
