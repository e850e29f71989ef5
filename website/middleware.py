from django.utils.functional import SimpleLazyObject

from .data_service import AdminSession, get_data_service


class DataServiceMiddleware:
    """
    Attach the Supabase service and the signed-in admin (if any) to the request.

    Views read ``request.data_service`` and ``request.admin_session`` instead of
    reaching for module globals.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.data_service = SimpleLazyObject(lambda: get_data_service())
        request.admin_session = AdminSession.from_session(request.session)
        return self.get_response(request)
