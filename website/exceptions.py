class SalonError(Exception):
    """Base class for every error raised by the salon apps."""


class DataServiceError(SalonError):
    """A call to Supabase failed (network, permissions, constraint...)."""

    def __init__(self, operation, detail=""):
        self.operation = operation
        self.detail = str(detail)
        message = f"{operation} failed"
        if self.detail:
            message = f"{message}: {self.detail}"
        super().__init__(message)


class AuthenticationFailed(SalonError):
    pass


class InvalidStatusTransition(SalonError):
    def __init__(self, current, target):
        self.current = current
        self.target = target
        super().__init__(f"Cannot move an appointment from '{current}' to '{target}'")


class AppointmentNotFound(SalonError):
    def __init__(self, appointment_id):
        self.appointment_id = appointment_id
        super().__init__(f"Appointment '{appointment_id}' not found")


class PhotoUploadError(DataServiceError):
    """One file of a photo batch failed; blobs already stored were removed."""

    def __init__(self, filename, detail=""):
        self.filename = filename
        super().__init__(f"upload of {filename}", detail)
