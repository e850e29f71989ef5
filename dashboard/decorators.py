import logging
from functools import wraps

from django.conf import settings
from django.contrib import messages
from django.shortcuts import redirect, render

from website.data_service import AdminSession
from website.exceptions import AuthenticationFailed

logger = logging.getLogger(__name__)


def admin_required(view_func):
    """
    Gate dashboard views behind a Supabase session with the admin role.

    Anonymous visitors go to the login page; signed-in users without the role
    get the access-denied page. On success ``request.admin_service`` runs every
    query with the admin's own token.
    """

    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        admin = request.admin_session
        if admin is None:
            return redirect(settings.LOGIN_URL)
        if not admin.is_admin:
            return render(request, "dashboard/pages/access_denied.html", {"email": admin.email}, status=403)

        try:
            request.admin_service = request.data_service.for_session(admin)
            tokens = request.admin_service.current_tokens()
        except AuthenticationFailed as e:
            AdminSession.clear(request.session)
            messages.error(request, str(e))
            return redirect(settings.LOGIN_URL)

        # keep refreshed tokens so the next request does not refresh again
        if tokens and tokens != (admin.access_token, admin.refresh_token):
            AdminSession(tokens[0], tokens[1], admin.user_id, admin.email, admin.is_admin).store(request.session)

        return view_func(request, *args, **kwargs)

    return _wrapped
