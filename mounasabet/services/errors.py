class AvailabilityError(Exception):
    """Base error for availability operations. ``message`` is safe to show users."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AvailabilityValidationError(AvailabilityError):
    pass


class RetrievalError(AvailabilityError):
    pass


class WriteError(AvailabilityError):
    pass


class SlotConflictError(AvailabilityError):
    def __init__(self, message: str, booking_id: str):
        super().__init__(message)
        self.booking_id = booking_id
