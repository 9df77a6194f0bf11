"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly.  ``str(exc)`` carries the internal
message (logged); ``user_message`` carries the short localized text shown to
the user.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""

    default_user_message = "Terjadi kesalahan"

    def __init__(self, message: str = "", *, user_message: str | None = None) -> None:
        super().__init__(message or self.default_user_message)
        self.user_message = user_message or self.default_user_message


class ValidationError(DomainException):
    """A business rule or invariant was violated."""

    default_user_message = "Data tidak valid"


class MissingCustomerError(ValidationError):
    default_user_message = "Silakan pilih customer"


class EmptyCartError(ValidationError):
    default_user_message = "Tambahkan minimal satu produk"


class InvalidQuantityError(ValidationError):
    """One or more cart selections have a quantity of zero or less."""

    default_user_message = "Jumlah produk tidak boleh kosong atau 0"

    def __init__(self, message: str = "", *, offending: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.offending = offending


class DuplicateProductInCartError(ValidationError):
    default_user_message = "Produk sudah ada di keranjang"


class UnsupportedUnitError(ValidationError):
    default_user_message = "Satuan tidak tersedia untuk produk ini"


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""

    default_user_message = "Data tidak ditemukan"


class InvalidStatusTransitionError(DomainException):
    """The transaction's status does not allow the requested operation."""

    default_user_message = "Status nota tidak mengizinkan perubahan ini"


class ConcurrentModificationError(DomainException):
    """The record changed since it was loaded (optimistic version check)."""

    default_user_message = "Nota telah diubah, muat ulang lalu coba lagi"


class PersistenceFailure(DomainException):
    """The record store failed to carry out a request."""

    default_user_message = "Gagal menyimpan data"


class DuplicateTransactionNumberError(PersistenceFailure):
    default_user_message = "Nomor transaksi sudah digunakan"


class ReferentialConflictError(PersistenceFailure):
    default_user_message = "Data masih terkait dengan data lain"


class CorruptRecordError(PersistenceFailure):
    """A stored row could not be parsed into a domain record."""

    default_user_message = "Data tersimpan rusak"
