def mission_payload(
    *,
    name: str = "Chez Marcel",
    sector: str = "restaurant",
    city: str = "Lyon",
    description: str = "Bistrot familial avec cuisine maison",
    business_type: str = "bistrot",
    preferred_style: str = "elegant",
    budget: str = "premium",
    timeframe: str = "standard",
    priority: str = "medium",
    mission_id: str | None = None,
) -> dict:
    payload = {
        "businessInfo": {"name": name, "sector": sector, "city": city, "description": description},
        "requirements": {
            "sector": sector,
            "businessType": business_type,
            "targetAudience": "familles et habitués du quartier",
            "businessGoals": ["generer-leads"],
            "preferredStyle": preferred_style,
            "budget": budget,
            "timeframe": timeframe,
        },
        "priority": priority,
    }
    if mission_id is not None:
        payload["id"] = mission_id
    return payload
