# /studio-backend/app/services/registration_helpers/roster_export.py

import pandas as pd
from typing import List, Dict

ROSTER_COLUMNS = ['First Name', 'Last Name', 'Email', 'Phone', 'Registration', 'Date', 'Class Title']


def build_roster_csv(class_title: str, registrations: List) -> str:
    """
    Renders a class roster as CSV. `registrations` are ledger variants, already
    filtered to the active ones and sorted by name.
    """
    export_data = [
        {
            'First Name': r.first_name,
            'Last Name': r.last_name,
            'Email': r.email,
            'Phone': r.phone or "",
            'Registration': "Drop-in" if r.kind == "drop_in" else "Session",
            'Date': r.date.strftime("%Y-%m-%d") if r.kind == "drop_in" else "",
            'Class Title': class_title,
        } for r in registrations
    ]
    df = pd.DataFrame(export_data) if export_data else pd.DataFrame(columns=ROSTER_COLUMNS)
    return df.to_csv(index=False)


def summarize_occupancy(classes: List, active_registrations: List) -> List[Dict]:
    """
    Pairs each class with its effective occupancy, counted from the active
    registrations of all the classes at once.
    """
    registrations_df = pd.DataFrame([{"class_id": r.class_id} for r in active_registrations])
    occupancy = {}
    if not registrations_df.empty:
        occupancy = registrations_df.groupby('class_id').size().to_dict()

    summary_list = []
    for cls in classes:
        taken = int(occupancy.get(cls.id, 0))
        summary_list.append({
            "id": cls.id,
            "title": cls.title,
            "capacity": cls.capacity,
            "occupancy": taken,
            "spacesLeft": max(cls.capacity - taken, 0),
        })
    return summary_list
