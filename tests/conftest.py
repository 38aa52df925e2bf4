import pytest
import structlog

from simpleauth import AuthConfig, SimpleAuth

TEST_KEY = "testkey"
REFERENCE_TS = 1503754961


class FakeClock:
    """Manually advanced clock returning whole seconds."""

    def __init__(self, now: int = REFERENCE_TS):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


@pytest.fixture
def test_key():
    return TEST_KEY


@pytest.fixture
def reference_ts():
    """Issue time of the reference tokens."""
    return REFERENCE_TS


@pytest.fixture
def token_a():
    """Key "testkey", SHA256, empty payload, issued at REFERENCE_TS."""
    return "SHA256,1503754961,,40165BDD970907E4334BBBF0FEFFC77A01CC6EA5870C6F9CD64FD8241455FC1F"


@pytest.fixture
def token_b():
    """Key "testkey", SHA256, user/msg payload, issued at REFERENCE_TS."""
    return (
        "SHA256,1503754961,"
        "user=lazaro&msg=wake+up%21+and+give+me+500%E2%82%AC,"
        "C48A4805A70DDB641A0C330A41FAED285D7131ECD46ED21096213150605EBA19"
    )


@pytest.fixture
def token_c():
    """Key "testkey", SHA256, empty payload, issued before REFERENCE_TS."""
    return "SHA256,1503752846,,3343048D984C2F8784D7F3F078D18A7F6B5781A89396171634A7478246518BDD"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def auth(clock):
    return SimpleAuth(AuthConfig(pre_shared_key=TEST_KEY), clock=clock)
