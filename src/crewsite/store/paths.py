"""Document path layout.

Centralized path definitions under the ``crewsite/`` root.
"""

ROOT = "crewsite"

ATTENDANCE = f"{ROOT}/attendance"
OPEN_SHIFTS = f"{ROOT}/openShifts"
SITES = f"{ROOT}/sites"


def attendance_record(record_id: str) -> str:
    return f"{ATTENDANCE}/{record_id}"


def open_shift_lock(worker_id: str, site_id: str) -> str:
    return f"{OPEN_SHIFTS}/{worker_id}__{site_id}"


def site(site_id: str) -> str:
    return f"{SITES}/{site_id}"


def worker_profile(worker_id: str) -> str:
    return f"{ROOT}/users/{worker_id}/profile/main"


def payroll_summaries(manager_id: str) -> str:
    return f"{ROOT}/users/{manager_id}/payrollSummaries"


def payroll_summary(manager_id: str, summary_id: str) -> str:
    return f"{payroll_summaries(manager_id)}/{summary_id}"
