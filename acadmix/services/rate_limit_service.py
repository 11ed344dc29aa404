"""In-memory sliding-window rate limiting for public proxy routes."""

import re
import threading
import time

RATE_LIMIT_EVENTS = {}
RATE_LIMIT_LOCK = threading.Lock()
RATE_LIMIT_SWEEP_STATE = {'last_sweep': 0.0}


def normalize_rate_limit_key_part(value, fallback='anon', max_len=120):
    raw = str(value or '').strip().lower()
    if not raw:
        return fallback
    safe = re.sub(r'[^a-z0-9_.:@-]+', '_', raw)
    return safe[:max_len] if safe else fallback


def client_address(request):
    # Forwarded headers are only honoured through ProxyFix, which rewrites remote_addr.
    return request.remote_addr or ''


def sweep_stale_keys(events, cutoff):
    stale = [key for key, timestamps in events.items() if not timestamps or timestamps[-1] < cutoff]
    for key in stale:
        del events[key]
    return len(stale)


def check_rate_limit(
    key,
    limit,
    window_seconds,
    *,
    in_memory_events=None,
    in_memory_lock=None,
    sweep_state=None,
    time_module=time,
):
    events = RATE_LIMIT_EVENTS if in_memory_events is None else in_memory_events
    lock = RATE_LIMIT_LOCK if in_memory_lock is None else in_memory_lock
    if sweep_state is None:
        sweep_state = RATE_LIMIT_SWEEP_STATE if in_memory_events is None else {'last_sweep': 0.0}
    now_ts = time_module.time()
    cutoff = now_ts - window_seconds

    with lock:
        if now_ts - sweep_state.get('last_sweep', 0.0) >= window_seconds:
            sweep_stale_keys(events, cutoff)
            sweep_state['last_sweep'] = now_ts

        kept = [ts for ts in events.get(key, []) if ts >= cutoff]
        if len(kept) >= limit:
            oldest = kept[0]
            retry_after = max(1, int((oldest + window_seconds) - now_ts))
            events[key] = kept
            return False, retry_after
        kept.append(now_ts)
        events[key] = kept

    return True, 0


def reset_rate_limits(in_memory_events=None, in_memory_lock=None):
    events = RATE_LIMIT_EVENTS if in_memory_events is None else in_memory_events
    lock = RATE_LIMIT_LOCK if in_memory_lock is None else in_memory_lock
    with lock:
        events.clear()
        if in_memory_events is None:
            RATE_LIMIT_SWEEP_STATE['last_sweep'] = 0.0
