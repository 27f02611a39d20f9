import hashlib, json

def payload_hash(payload: dict) -> str:
    s = json.dumps(payload, sort_keys=True, default=str)
    return hashlib.sha256(s.encode()).hexdigest()

def cache_key(namespace: str, payload: dict) -> str:
    return f"{namespace}:{payload_hash(payload)}"
