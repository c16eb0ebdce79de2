import pytest

from usergate.authservice import (
    CredentialVerifier, Identity, InMemoryCredentialStore, PasswordHasher, SqliteCredentialStore,
)
from usergate.authservice.errors import InvalidCredentials, MissingPassword, StoreUnavailable

# Cheap Argon2 parameters keep the suite fast.
FAST = dict(time_cost=1, memory_cost=8, parallelism=1)
HASH_SECRET = "K1"


def make_verifier(hash_secret: str = HASH_SECRET):
    hasher = PasswordHasher(hash_secret, **FAST)
    store = InMemoryCredentialStore(hasher)
    store.add_user(id=17, email="a@x.com", password="secret1")
    return CredentialVerifier(store=store, hasher=hasher), store


class BrokenStore:
    def find_by_email(self, email):
        raise ConnectionError("db host 10.0.0.5 refused connection")


def test_matching_credentials_return_stored_id():
    verifier, _ = make_verifier()
    assert verifier.verify("a@x.com", "secret1") == Identity(id=17)


def test_single_character_password_mutations_fail():
    verifier, _ = make_verifier()
    password = "secret1"
    for i in range(len(password)):
        mutated = password[:i] + ("z" if password[i] != "z" else "y") + password[i + 1:]
        with pytest.raises(InvalidCredentials):
            verifier.verify("a@x.com", mutated)
    with pytest.raises(InvalidCredentials):
        verifier.verify("a@x.com", password + "!")
    with pytest.raises(InvalidCredentials):
        verifier.verify("a@x.com", password[:-1])


def test_unknown_email_and_wrong_password_look_the_same():
    verifier, _ = make_verifier()
    with pytest.raises(InvalidCredentials) as unknown:
        verifier.verify("nobody@x.com", "secret1")
    with pytest.raises(InvalidCredentials) as wrong:
        verifier.verify("a@x.com", "secret2")
    assert unknown.value.to_payload() == wrong.value.to_payload()


def test_email_match_is_exact_and_case_sensitive():
    verifier, _ = make_verifier()
    for email in ("A@x.com", "a@X.com", " a@x.com", "a@x.com "):
        with pytest.raises(InvalidCredentials):
            verifier.verify(email, "secret1")


@pytest.mark.parametrize("password", [None, ""])
def test_missing_password_is_reported_separately(password):
    verifier, _ = make_verifier()
    with pytest.raises(MissingPassword):
        verifier.verify("a@x.com", password)
    with pytest.raises(MissingPassword):
        verifier.verify("nobody@x.com", password)


@pytest.mark.parametrize("email", [None, "", 12])
def test_malformed_email_is_invalid_credentials(email):
    verifier, _ = make_verifier()
    with pytest.raises(InvalidCredentials):
        verifier.verify(email, "secret1")


def test_store_failure_is_store_unavailable_without_raw_details():
    hasher = PasswordHasher(HASH_SECRET, **FAST)
    verifier = CredentialVerifier(store=BrokenStore(), hasher=hasher)
    with pytest.raises(StoreUnavailable) as exc:
        verifier.verify("a@x.com", "secret1")
    assert "10.0.0.5" not in str(exc.value.to_payload())


def test_hash_made_under_another_secret_does_not_verify():
    other = PasswordHasher("K2", **FAST)
    hasher = PasswordHasher(HASH_SECRET, **FAST)
    store = InMemoryCredentialStore()
    store.add_record(id=1, email="a@x.com", password_hash=other.hash("secret1"))
    verifier = CredentialVerifier(store=store, hasher=hasher)
    with pytest.raises(InvalidCredentials):
        verifier.verify("a@x.com", "secret1")


def test_unparseable_stored_hash_is_invalid_credentials():
    hasher = PasswordHasher(HASH_SECRET, **FAST)
    store = InMemoryCredentialStore()
    store.add_record(id=1, email="a@x.com", password_hash="plaintext-secret1")
    verifier = CredentialVerifier(store=store, hasher=hasher)
    with pytest.raises(InvalidCredentials):
        verifier.verify("a@x.com", "secret1")


def test_hasher_output_is_argon2id_and_salted():
    hasher = PasswordHasher(HASH_SECRET, **FAST)
    h1 = hasher.hash("secret1")
    h2 = hasher.hash("secret1")
    assert h1.startswith("$argon2id$")
    assert h1 != h2
    assert hasher.verify("secret1", h1) and hasher.verify("secret1", h2)
    assert not hasher.verify("", h1)


def test_hasher_rejects_blank_inputs():
    with pytest.raises(ValueError):
        PasswordHasher("")
    with pytest.raises(ValueError):
        PasswordHasher(HASH_SECRET, **FAST).hash("")


def test_in_memory_store_rejects_duplicate_email():
    _, store = make_verifier()
    with pytest.raises(ValueError):
        store.add_user(email="a@x.com", password="other")


def test_sqlite_store_lookup(tmp_path):
    store = SqliteCredentialStore(str(tmp_path / "users.sqlite"))
    store.init_schema()
    hasher = PasswordHasher(HASH_SECRET, **FAST)
    rec = store.insert(email="a@x.com", password_hash=hasher.hash("secret1"))

    found = store.find_by_email("a@x.com")
    assert found is not None and found.id == rec.id
    assert store.find_by_email("A@X.COM") is None
    assert store.find_by_email("missing@x.com") is None

    verifier = CredentialVerifier(store=store, hasher=hasher)
    assert verifier.verify("a@x.com", "secret1").id == rec.id


def test_sqlite_store_without_schema_is_unavailable(tmp_path):
    store = SqliteCredentialStore(str(tmp_path / "empty.sqlite"))
    verifier = CredentialVerifier(store=store, hasher=PasswordHasher(HASH_SECRET, **FAST))
    with pytest.raises(StoreUnavailable):
        verifier.verify("a@x.com", "secret1")


def test_create_user_script_seeds_a_verifiable_row(tmp_path):
    import importlib.util
    from pathlib import Path

    path = Path(__file__).resolve().parents[1] / "scripts" / "create_user.py"
    spec = importlib.util.spec_from_file_location("create_user_script", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    store = SqliteCredentialStore(str(tmp_path / "seed.sqlite"))
    hasher = PasswordHasher(HASH_SECRET, **FAST)
    rec = module.create_user(store, hasher, email="a@x.com", password="secret1")

    verifier = CredentialVerifier(store=store, hasher=hasher)
    assert verifier.verify("a@x.com", "secret1").id == rec.id


@pytest.mark.parametrize("password", [123, ["secret1"], {"p": "secret1"}])
def test_non_string_password_is_invalid_credentials(password):
    verifier, _ = make_verifier()
    with pytest.raises(InvalidCredentials):
        verifier.verify("a@x.com", password)


class CountingHasher(PasswordHasher):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.verify_calls = 0

    def verify(self, password, encoded):
        self.verify_calls += 1
        return super().verify(password, encoded)


def test_unknown_email_still_runs_a_full_hash_check():
    hasher = CountingHasher(HASH_SECRET, **FAST)
    store = InMemoryCredentialStore(hasher)
    store.add_user(id=17, email="a@x.com", password="secret1")
    verifier = CredentialVerifier(store=store, hasher=hasher)

    with pytest.raises(InvalidCredentials):
        verifier.verify("a@x.com", "secret2")
    assert hasher.verify_calls == 1

    with pytest.raises(InvalidCredentials):
        verifier.verify("nobody@x.com", "secret1")
    assert hasher.verify_calls == 2


def test_dummy_check_never_succeeds():
    hasher = PasswordHasher(HASH_SECRET, **FAST)
    assert hasher.verify_dummy("secret1") is False
