import os
import tempfile

# cashbook.main builds a module-level app from the environment on import
os.environ.setdefault("CASHBOOK_DATA_DIR", tempfile.mkdtemp(prefix="cashbook-tests-"))
