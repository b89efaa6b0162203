class InvalidInput(Exception):
    pass


class NotFoundException(Exception):
    def __init__(self, resource: str, identifier: str, status_code: int = 404):
        self.resource = resource
        self.identifier = identifier
        self.status_code = status_code
        super().__init__(str(self))

    def __str__(self):
        return f"{self.resource} '{self.identifier}' not found"


class Forbidden(Exception):
    pass


class ConflictException(Exception):
    pass


class PackageAlreadyExists(ConflictException):
    pass


class BookingNumberCollision(ConflictException):
    def __init__(self, booking_number: str):
        self.booking_number = booking_number
        super().__init__(f"booking number {booking_number} is already taken")


class InvalidStatusTransition(InvalidInput):
    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"cannot move booking from '{current}' to '{target}'")


class InvariantViolation(Exception):
    pass
