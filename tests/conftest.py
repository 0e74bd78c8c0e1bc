import os
import warnings

# Ignore warnings from third-party protobuf stubs pulled in by livekit
warnings.filterwarnings("ignore", category=DeprecationWarning, module="google.protobuf.*")

# Set test environment variables
os.environ.update(
    {
        "LIVEKIT_URL": os.environ.get("LIVEKIT_URL", "wss://livekit.test.local"),
        "LIVEKIT_API_KEY": os.environ.get("LIVEKIT_API_KEY", "test-api-key"),
        "LIVEKIT_API_SECRET": os.environ.get(
            "LIVEKIT_API_SECRET", "test-api-secret-with-enough-length-for-hs256"
        ),
        "VALENTINES_JWT_SECRET": "test-valentines-secret-with-enough-length",
    }
)

# Import database fixtures so they are available to all tests
from tests.fixtures.mongo_fixtures import *  # noqa: E402, F403
