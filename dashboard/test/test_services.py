from unittest import mock

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import SimpleTestCase

from website.exceptions import AppointmentNotFound, DataServiceError, InvalidStatusTransition, PhotoUploadError
from website.models import Appointment, CustomerRecord
from dashboard.services import (
    AppointmentBoard,
    publish_gallery_style,
    search_customer_records,
    store_customer_record,
    upload_photos,
)

PUBLIC = "https://x.supabase.co/storage/v1/object/public"


def appt(id, status=Appointment.STATUS_PENDING, day="2026-02-18", time="10:00 AM"):
    return Appointment(
        id=id,
        customer_name=f"Client {id}",
        customer_phone="0800",
        service_type="Cornrows",
        preferred_date=day,
        preferred_time=time,
        status=status,
    )


def photo(name):
    return SimpleUploadedFile(name, b"fake-image", content_type="image/jpeg")


class AppointmentBoardTests(SimpleTestCase):
    def setUp(self):
        self.service = mock.MagicMock()
        self.board = AppointmentBoard(self.service, [appt("a"), appt("b"), appt("c", Appointment.STATUS_CONFIRMED)])

    def test_confirm_replaces_only_that_entry(self):
        print("\n[TEST] confirming one appointment leaves the others untouched")
        before = self.board.appointments

        updated = self.board.change_status("b", Appointment.STATUS_CONFIRMED)

        self.service.update_appointment_status.assert_called_once_with("b", "confirmed")
        self.assertEqual(updated.status, "confirmed")
        after = self.board.appointments
        self.assertEqual([a.id for a in after], ["a", "b", "c"])
        self.assertIs(after[0], before[0])
        self.assertIs(after[2], before[2])

    def test_failed_update_keeps_local_state(self):
        print("\n[TEST] a failed status update changes nothing locally")
        self.service.update_appointment_status.side_effect = DataServiceError("update", "offline")

        with self.assertRaises(DataServiceError):
            self.board.change_status("a", Appointment.STATUS_CONFIRMED)

        self.assertEqual(self.board.get("a").status, Appointment.STATUS_PENDING)

    def test_repeating_a_status_sends_nothing(self):
        result = self.board.change_status("c", Appointment.STATUS_CONFIRMED)
        self.assertEqual(result.status, "confirmed")
        self.service.update_appointment_status.assert_not_called()

    def test_illegal_move_is_rejected_before_the_request(self):
        with self.assertRaises(InvalidStatusTransition):
            self.board.change_status("a", Appointment.STATUS_COMPLETED)
        self.service.update_appointment_status.assert_not_called()

    def test_unknown_id(self):
        with self.assertRaises(AppointmentNotFound):
            self.board.change_status("zzz", Appointment.STATUS_CONFIRMED)

    def test_load_sorts_by_slot(self):
        self.service.list_appointments.return_value = [
            appt("late", time="2:00 PM"), appt("early", time="9:00 AM"), appt("tomorrow", day="2026-02-19", time="9:00 AM"),
        ]
        board = AppointmentBoard.load(self.service)
        self.assertEqual([a.id for a in board.appointments], ["early", "late", "tomorrow"])


class PhotoUploadTests(SimpleTestCase):
    def setUp(self):
        self.service = mock.MagicMock()
        self.service.gallery_bucket = "styles"
        self.service.customer_bucket = "customer-photos"

    def test_uploads_every_file(self):
        self.service.upload_file.side_effect = lambda bucket, path, content, ctype: f"{PUBLIC}/{bucket}/{path}"

        urls = upload_photos(self.service, "customer-photos", [photo("a.JPG"), photo("b.png")], prefix="records/")

        self.assertEqual(len(urls), 2)
        paths = [c.args[1] for c in self.service.upload_file.call_args_list]
        self.assertTrue(all(p.startswith("records/") for p in paths))
        self.assertTrue(paths[0].endswith(".jpg"))
        self.assertTrue(paths[1].endswith(".png"))
        self.assertNotEqual(paths[0], paths[1])

    def test_failed_upload_rolls_back_the_batch(self):
        print("\n[TEST] one failed photo removes the ones already stored")
        self.service.upload_file.side_effect = [
            f"{PUBLIC}/customer-photos/records/1.jpg",
            DataServiceError("upload of records/2.jpg", "quota exceeded"),
        ]

        with self.assertRaises(PhotoUploadError) as ctx:
            store_customer_record(self.service, {"customer_name": "Ada"}, [photo("one.jpg"), photo("two.jpg")])

        self.assertEqual(ctx.exception.filename, "two.jpg")
        first_path = self.service.upload_file.call_args_list[0].args[1]
        self.service.remove_files.assert_called_once_with("customer-photos", [first_path])
        self.service.create_customer_record.assert_not_called()

    def test_failed_insert_removes_uploaded_photos(self):
        self.service.upload_file.return_value = f"{PUBLIC}/customer-photos/records/1.jpg"
        self.service.create_customer_record.side_effect = DataServiceError("create customer record", "denied")

        with self.assertRaises(DataServiceError):
            store_customer_record(self.service, {"customer_name": "Ada"}, [photo("one.jpg")])

        self.service.remove_files.assert_called_once_with("customer-photos", ["records/1.jpg"])

    def test_record_without_photos(self):
        store_customer_record(self.service, {"customer_name": "Ada"})
        self.service.upload_file.assert_not_called()
        self.service.create_customer_record.assert_called_once_with({"customer_name": "Ada", "photos": None})

    def test_gallery_style_gets_its_image_url(self):
        self.service.upload_file.return_value = f"{PUBLIC}/styles/123.jpg"

        publish_gallery_style(self.service, {"title": "Goddess Braids", "category": "Braids"}, photo("x.jpg"))

        self.assertEqual(self.service.upload_file.call_args.args[0], "styles")
        row = self.service.create_gallery_style.call_args.args[0]
        self.assertEqual(row["image_url"], f"{PUBLIC}/styles/123.jpg")

    def test_cleanup_failure_still_reports_the_upload_error(self):
        self.service.upload_file.side_effect = [f"{PUBLIC}/styles/1.jpg", DataServiceError("upload", "boom")]
        self.service.remove_files.side_effect = DataServiceError("remove", "boom")

        with self.assertRaises(PhotoUploadError):
            upload_photos(self.service, "styles", [photo("1.jpg"), photo("2.jpg")])


class CustomerSearchTests(SimpleTestCase):
    def test_search(self):
        records = [
            CustomerRecord("1", "Ada Obi", "Box Braids", "2026-01-02", customer_phone="0801"),
            CustomerRecord("2", "Kemi Ade", "Frontal Wig", "2026-01-01"),
        ]
        self.assertEqual([r.id for r in search_customer_records(records, " wig ")], ["2"])
        self.assertEqual(len(search_customer_records(records, "")), 2)
        self.assertEqual([r.id for r in search_customer_records(records, "0801")], ["1"])
