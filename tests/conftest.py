import os
import tempfile

# the API module binds its database at import time
_tmpdir = tempfile.mkdtemp(prefix="phishcheck-tests-")
os.environ.setdefault("PHISHCHECK_DATABASE_URL", "sqlite:///" + os.path.join(_tmpdir, "test.db"))
os.environ.pop("PHISHCHECK_API_KEY", None)
os.environ.pop("PHISHCHECK_SAFE_BROWSING_ENABLED", None)
os.environ.pop("PHISHCHECK_CONFIG_FILE", None)
