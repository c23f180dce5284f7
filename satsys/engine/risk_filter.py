from satsys.config.settings import LOW_RISK_LABEL, MAX_SHORTLIST


def _as_float(x, default=float("inf")):
    try:
        if x is None:
            return default
        return float(x)
    except (TypeError, ValueError):
        return default


def _pair_key(r):
    a = str(r.get("satellite_id") or r.get("name") or "unknown")
    b = str(r.get("other_id") or r.get("other_name") or "unknown")
    return tuple(sorted((a, b)))


def shortlist(pair_results, max_candidates=MAX_SHORTLIST, include_low=False):
    """
    Pick the best record per satellite pair (order-independent), drop low-risk
    pairs unless include_low, and sort by miss distance.
    """
    candidates = [
        r for r in (pair_results or [])
        if include_low or r.get("risk", LOW_RISK_LABEL) != LOW_RISK_LABEL
    ]

    best_by_pair = {}
    for r in candidates:
        key_id = _pair_key(r)
        md = _as_float(r.get("minDistanceKm", r.get("miss_distance", None)), default=float("inf"))
        p = _as_float(r.get("probability", 0.0), default=0.0)

        cur = best_by_pair.get(key_id)
        key = (md, -p)  # prefer smaller miss, then higher probability
        if cur is None or key < cur[0]:
            best_by_pair[key_id] = (key, r)

    out = [v[1] for v in best_by_pair.values()]
    out.sort(
        key=lambda r: _as_float(r.get("minDistanceKm", r.get("miss_distance", None)), default=float("inf"))
    )
    return out[: int(max_candidates)]
