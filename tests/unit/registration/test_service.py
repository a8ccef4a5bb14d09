"""Unit tests for RegistrationService."""

from unittest.mock import MagicMock, patch

import pytest
from passlib.context import CryptContext

from studentreg.registration import (
    ConflictError,
    RegisteredStudent,
    RegistrationService,
    StudentRegistrationInput,
    ValidationError,
    normalize_email,
    verify_password,
)
from studentreg.student_store import DuplicateKeyError, StoreError, StudentStore


@pytest.fixture
def service(store: StudentStore, password_context: CryptContext) -> RegistrationService:
    """RegistrationService over an in-memory store."""
    return RegistrationService(store, password_context=password_context)


def make_input(**kwargs: str | None) -> StudentRegistrationInput:
    fields = {"name": "Ann", "email": "ann@example.com", "password": "secret1", "course": "CS"}
    fields.update(kwargs)
    return StudentRegistrationInput(**fields)


@pytest.mark.unit
class TestNormalizeEmail:
    """Tests for normalize_email."""

    def test_trims_and_lowercases(self) -> None:
        assert normalize_email("  Ann@Example.COM ") == "ann@example.com"

    @pytest.mark.parametrize(
        "email",
        ["ann@example.com", " Ann@Example.com ", "\tBOB@X.ORG\n", "MiXeD@CaSe.Io  "],
    )
    def test_idempotent(self, email: str) -> None:
        """Normalizing twice gives the same key as normalizing once."""
        once = normalize_email(email)
        assert normalize_email(once) == once


@pytest.mark.unit
class TestValidation:
    """Tests for input validation before any store access."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides",
        [
            {"name": None},
            {"email": None},
            {"password": None},
            {"name": ""},
            {"email": ""},
            {"password": ""},
            {"name": "   "},
            {"email": " \t "},
            {"password": "       "},
        ],
    )
    async def test_missing_required_field(self, overrides: dict, password_context) -> None:
        """ValidationError and no store access when name, email or password is blank."""
        store = MagicMock(spec=StudentStore)
        service = RegistrationService(store, password_context=password_context)

        with pytest.raises(ValidationError) as exc_info:
            await service.register(make_input(**overrides))

        assert str(exc_info.value) == "name, email and password are required"
        store.find_by_normalized_email.assert_not_called()
        store.insert.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("password", ["a", "12345", "abcde"])
    async def test_password_too_short(self, password: str, password_context) -> None:
        """Passwords under 6 characters are rejected before any store access."""
        store = MagicMock(spec=StudentStore)
        service = RegistrationService(store, password_context=password_context)

        with pytest.raises(ValidationError) as exc_info:
            await service.register(make_input(password=password))

        assert str(exc_info.value) == "password too short"
        store.find_by_normalized_email.assert_not_called()
        store.insert.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("password", ["x" * 73, "é" * 37])
    async def test_password_too_long(self, password: str, password_context) -> None:
        """Passwords over 72 UTF-8 bytes are rejected instead of truncated."""
        store = MagicMock(spec=StudentStore)
        service = RegistrationService(store, password_context=password_context)

        with pytest.raises(ValidationError) as exc_info:
            await service.register(make_input(password=password))

        assert str(exc_info.value) == "password too long"
        store.find_by_normalized_email.assert_not_called()
        store.insert.assert_not_called()

    @pytest.mark.asyncio
    async def test_password_of_72_bytes_accepted(
        self, service: RegistrationService, store: StudentStore
    ) -> None:
        await service.register(make_input(password="x" * 72))

        assert store.count_students() == 1

    @pytest.mark.asyncio
    async def test_missing_fields_checked_before_length(self, password_context) -> None:
        """A blank name wins over a short password."""
        store = MagicMock(spec=StudentStore)
        service = RegistrationService(store, password_context=password_context)

        with pytest.raises(ValidationError) as exc_info:
            await service.register(make_input(name="", password="abc"))

        assert str(exc_info.value) == "name, email and password are required"

    @pytest.mark.asyncio
    async def test_empty_name_leaves_store_empty(
        self, service: RegistrationService, store: StudentStore
    ) -> None:
        """Empty name with a valid email and password creates nothing."""
        with pytest.raises(ValidationError):
            await service.register(
                StudentRegistrationInput(name="", email="a@b.com", password="secret1")
            )

        assert store.count_students() == 0


@pytest.mark.unit
class TestRegister:
    """Tests for successful registration."""

    @pytest.mark.asyncio
    async def test_register_normalizes_and_stores(
        self, service: RegistrationService, store: StudentStore
    ) -> None:
        """Email is stored trimmed and lower-cased."""
        student = await service.register(
            StudentRegistrationInput(
                name="Ann", email=" Ann@Example.com ", password="secret1", course="CS"
            )
        )

        assert student.email == "ann@example.com"
        assert student.name == "Ann"
        assert student.course == "CS"
        assert student.id
        assert student.created_at is not None

        stored = store.find_by_normalized_email("ann@example.com")
        assert stored is not None
        assert stored.id == student.id
        assert store.count_students() == 1

    @pytest.mark.asyncio
    async def test_register_trims_name_and_course(
        self, service: RegistrationService, store: StudentStore
    ) -> None:
        student = await service.register(make_input(name="  Ann Lee ", course="  Maths "))

        assert student.name == "Ann Lee"
        assert student.course == "Maths"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("course", [None, "", "   "])
    async def test_register_without_course(
        self, service: RegistrationService, course: str | None
    ) -> None:
        """Missing or blank course is stored as None."""
        student = await service.register(make_input(course=course))

        assert student.course is None

    @pytest.mark.asyncio
    async def test_register_returns_sanitized_view(self, service: RegistrationService) -> None:
        """The returned view has no password or hash field."""
        student = await service.register(make_input())

        assert isinstance(student, RegisteredStudent)
        assert not hasattr(student, "password")
        assert not hasattr(student, "password_hash")
        assert "secret1" not in repr(student)

    @pytest.mark.asyncio
    async def test_password_is_hashed(
        self,
        service: RegistrationService,
        store: StudentStore,
        password_context: CryptContext,
    ) -> None:
        """Stored hash differs from the plaintext and verifies against it."""
        student = await service.register(make_input())

        stored = store.get_student(student.id)
        assert stored is not None
        assert stored.password_hash != "secret1"
        assert verify_password("secret1", stored.password_hash, password_context)
        assert not verify_password("secret2", stored.password_hash, password_context)

    @pytest.mark.asyncio
    async def test_same_password_gives_different_hashes(
        self, service: RegistrationService, store: StudentStore
    ) -> None:
        """Two students with the same password get different salted hashes."""
        first = await service.register(make_input(email="one@example.com"))
        second = await service.register(make_input(email="two@example.com"))

        first_hash = store.get_student(first.id).password_hash
        second_hash = store.get_student(second.id).password_hash
        assert first_hash != second_hash

    @pytest.mark.asyncio
    async def test_password_exactly_minimum_length(self, service: RegistrationService) -> None:
        """Six characters is long enough."""
        student = await service.register(make_input(password="123456"))

        assert student.email == "ann@example.com"

    @pytest.mark.asyncio
    async def test_password_not_trimmed(
        self,
        service: RegistrationService,
        store: StudentStore,
        password_context: CryptContext,
    ) -> None:
        """Surrounding spaces are part of the password."""
        student = await service.register(make_input(password=" secret1 "))

        stored = store.get_student(student.id)
        assert verify_password(" secret1 ", stored.password_hash, password_context)
        assert not verify_password("secret1", stored.password_hash, password_context)


@pytest.mark.unit
class TestConflicts:
    """Tests for duplicate email handling."""

    @pytest.mark.asyncio
    async def test_second_registration_conflicts(
        self, service: RegistrationService, store: StudentStore
    ) -> None:
        """Same email again fails with ConflictError and creates nothing."""
        await service.register(make_input(email=" Ann@Example.com "))

        with pytest.raises(ConflictError) as exc_info:
            await service.register(make_input(email=" Ann@Example.com ", password="other-pass"))

        assert str(exc_info.value) == "email already registered"
        assert store.count_students() == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "second_email",
        ["ANN@EXAMPLE.COM", "  ann@example.com", "Ann@example.Com  ", "\tann@EXAMPLE.com\n"],
    )
    async def test_case_and_whitespace_variants_conflict(
        self, service: RegistrationService, store: StudentStore, second_email: str
    ) -> None:
        await service.register(make_input(email="ann@example.com"))

        with pytest.raises(ConflictError):
            await service.register(make_input(email=second_email))

        assert store.count_students() == 1

    @pytest.mark.asyncio
    async def test_insert_race_maps_to_conflict(self, password_context) -> None:
        """DuplicateKeyError from insert becomes ConflictError."""
        store = MagicMock(spec=StudentStore)
        store.find_by_normalized_email.return_value = None
        store.insert.side_effect = DuplicateKeyError("taken")
        service = RegistrationService(store, password_context=password_context)

        with pytest.raises(ConflictError) as exc_info:
            await service.register(make_input())

        assert str(exc_info.value) == "email already registered"
        assert isinstance(exc_info.value.__cause__, DuplicateKeyError)

    @pytest.mark.asyncio
    async def test_fast_path_skips_hashing(self, password_context) -> None:
        """A known email is rejected without hashing or inserting."""
        store = MagicMock(spec=StudentStore)
        store.find_by_normalized_email.return_value = MagicMock()
        service = RegistrationService(store, password_context=password_context)

        with patch("studentreg.registration.service.hash_password") as mock_hash:
            with pytest.raises(ConflictError):
                await service.register(make_input())

        mock_hash.assert_not_called()
        store.insert.assert_not_called()


@pytest.mark.unit
class TestStoreFailures:
    """Tests for store failures."""

    @pytest.mark.asyncio
    async def test_lookup_failure_propagates(self, password_context) -> None:
        store = MagicMock(spec=StudentStore)
        store.find_by_normalized_email.side_effect = StoreError("down")
        service = RegistrationService(store, password_context=password_context)

        with pytest.raises(StoreError):
            await service.register(make_input())

        store.insert.assert_not_called()

    @pytest.mark.asyncio
    async def test_insert_failure_propagates(self, password_context) -> None:
        store = MagicMock(spec=StudentStore)
        store.find_by_normalized_email.return_value = None
        store.insert.side_effect = StoreError("write failed")
        service = RegistrationService(store, password_context=password_context)

        with pytest.raises(StoreError) as exc_info:
            await service.register(make_input())

        assert not isinstance(exc_info.value, ConflictError)

    @pytest.mark.asyncio
    async def test_lookup_uses_normalized_email(self, password_context) -> None:
        store = MagicMock(spec=StudentStore)
        store.find_by_normalized_email.return_value = MagicMock()
        service = RegistrationService(store, password_context=password_context)

        with pytest.raises(ConflictError):
            await service.register(make_input(email="  Ann@Example.COM "))

        store.find_by_normalized_email.assert_called_once_with("ann@example.com")
