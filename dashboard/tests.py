from django.urls import reverse

from website.exceptions import AuthenticationFailed
from dashboard.test.support import DashboardTestCase


class DashboardAccessSmokeTests(DashboardTestCase):
    def setUp(self):
        super().setUp()
        self.protected_urls = [
            reverse("dashboard:home"),
            reverse("dashboard:appointments"),
            reverse("dashboard:gallery"),
            reverse("dashboard:prices"),
            reverse("dashboard:customers"),
        ]

    def test_protected_pages_require_login(self):
        for url in self.protected_urls:
            response = self.client.get(url)
            self.assertEqual(response.status_code, 302)
            self.assertIn(reverse("dashboard:login"), response.url)

    def test_non_admin_is_rejected(self):
        self.sign_in(is_admin=False)
        for url in self.protected_urls:
            response = self.client.get(url)
            self.assertEqual(response.status_code, 403)
            self.assertTemplateUsed(response, "dashboard/pages/access_denied.html")

    def test_admin_can_access(self):
        self.sign_in()
        for url in self.protected_urls:
            response = self.client.get(url)
            self.assertEqual(response.status_code, 200, url)

    def test_expired_session_goes_back_to_login(self):
        self.sign_in()
        self.service.for_session.side_effect = AuthenticationFailed("Your session has expired. Please sign in again.")

        response = self.client.get(reverse("dashboard:appointments"))

        self.assertEqual(response.status_code, 302)
        self.assertIn(reverse("dashboard:login"), response.url)
        self.assertNotIn("sb_admin", self.client.session)
