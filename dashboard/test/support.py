from unittest import mock

from django.conf import settings
from django.test import SimpleTestCase

from website.data_service import AdminSession


class DashboardTestCase(SimpleTestCase):
    """
    Base class for dashboard view tests.
    Supabase is replaced by a MagicMock that also serves as the admin-scoped service.
    """

    def setUp(self):
        self.service = mock.MagicMock()
        self.service.for_session.return_value = self.service
        self.service.current_tokens.return_value = None
        self.service.gallery_bucket = "styles"
        self.service.customer_bucket = "customer-photos"
        self.service.list_appointments.return_value = []
        self.service.list_gallery_styles.return_value = []
        self.service.list_prices.return_value = []
        self.service.list_customer_records.return_value = []

        patcher = mock.patch("website.middleware.get_data_service", return_value=self.service)
        patcher.start()
        self.addCleanup(patcher.stop)

    def sign_in(self, is_admin=True, email="owner@salon.test"):
        admin = AdminSession("access", "refresh", "user-1", email, is_admin)
        session = self.client.session
        admin.store(session)
        session.save()
        # signed-cookie sessions change their key on every save
        self.client.cookies[settings.SESSION_COOKIE_NAME] = session.session_key
        return admin
