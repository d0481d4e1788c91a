import secrets
import string
import time

ALPHABET = string.ascii_uppercase + string.digits


class ReferenceGenerator:
    """Booking reference and QR token factory.

    Values are a millisecond timestamp plus a random suffix; uniqueness is
    still enforced by the bookings table constraints.
    """

    reference_prefix = "BK"
    qr_prefix = "QR"
    reference_suffix_length = 5
    qr_suffix_length = 9

    def new_reference(self) -> str:
        return self._build(self.reference_prefix, self.reference_suffix_length)

    def new_qr_token(self) -> str:
        return self._build(self.qr_prefix, self.qr_suffix_length)

    def _build(self, prefix: str, suffix_length: int) -> str:
        suffix = "".join(secrets.choice(ALPHABET) for _ in range(suffix_length))
        return f"{prefix}{int(time.time() * 1000)}{suffix}"
