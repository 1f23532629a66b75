from fastapi import APIRouter, status

from gpjourney.api.dependencies import JournalStore, to_http_error
from gpjourney.models.journal import DoctorVisit, DoctorVisitCreate, DoctorVisitUpdate
from gpjourney.services import journal

router = APIRouter(prefix="/api/doctor-visits", tags=["doctor-visits"])


@router.get(
    "",
    response_model=list[DoctorVisit],
    response_model_exclude_none=True,
    summary="Get the doctor-visit history",
)
def get_doctor_visits(store: JournalStore) -> list[DoctorVisit]:
    return store.get_doctor_visits()


@router.put(
    "",
    response_model=list[DoctorVisit],
    response_model_exclude_none=True,
    summary="Replace the doctor-visit history",
)
def save_doctor_visits(visits: list[DoctorVisit], store: JournalStore) -> list[DoctorVisit]:
    store.save_doctor_visits(visits)
    return visits


@router.post(
    "",
    response_model=DoctorVisit,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Add a doctor visit",
    description="Visits with details get a short AI summary of those details.",
)
async def add_doctor_visit(payload: DoctorVisitCreate, store: JournalStore) -> DoctorVisit:
    return await journal.add_doctor_visit(store, payload)


@router.patch(
    "/{visit_id}",
    response_model=DoctorVisit,
    response_model_exclude_none=True,
    summary="Edit a doctor visit",
    description="The AI summary is regenerated only when the details change.",
)
async def update_doctor_visit(
    visit_id: str, payload: DoctorVisitUpdate, store: JournalStore
) -> DoctorVisit:
    try:
        return await journal.update_doctor_visit(store, visit_id, payload)
    except journal.RecordNotFoundError as exc:
        raise to_http_error(exc)
