def entry(site_id, month, monthly, target=12.5, **extra):
    payload = {
        "site_id": site_id,
        "month": month,
        "monthly_progress": monthly,
        "target_rate": target
    }
    payload.update(extra)
    return payload
