from dotenv import load_dotenv

load_dotenv()

import json
import os

from afsverify.afs.client import AfsClient
from afsverify.core.errors import AfsError

# Per-call fields come from a real slider/captcha session on the front end
fields = {
    "Token": os.getenv("AFS_TOKEN", "").strip(),
    "SessionId": os.getenv("AFS_SESSION_ID", "").strip(),
    "Sig": os.getenv("AFS_SIG", "").strip(),
    "RemoteIp": os.getenv("AFS_REMOTE_IP", "").strip(),
    "Scene": os.getenv("AFS_SCENE", "").strip() or None,
}

try:
    client = AfsClient.from_settings()
    result = client.authenticate_sig(fields)
except AfsError as e:
    raise SystemExit(f"{e.__class__.__name__}: {e}")

print(json.dumps(result, ensure_ascii=False, indent=2))
