# Simple pub/sub
_subs: dict[str, list] = {}

def publish(topic: str, payload=None):
    for h in _subs.get(topic, []):
        h(payload)

def subscribe(topic: str, handler):
    _subs.setdefault(topic, []).append(handler)

def unsubscribe(topic: str, handler):
    handlers = _subs.get(topic, [])
    if handler in handlers:
        handlers.remove(handler)
