from fastapi import APIRouter, status

from gpjourney.api.dependencies import JournalStore, to_http_error
from gpjourney.models.journal import Medication, MedicationCreate, MedicationUpdate
from gpjourney.services import journal

router = APIRouter(prefix="/api/medications", tags=["medications"])


@router.get("", response_model=list[Medication], summary="Get the medication list")
def get_medications(store: JournalStore) -> list[Medication]:
    return store.get_medications()


@router.put("", response_model=list[Medication], summary="Replace the medication list")
def save_medications(medications: list[Medication], store: JournalStore) -> list[Medication]:
    store.save_medications(medications)
    return medications


@router.post(
    "",
    response_model=Medication,
    status_code=status.HTTP_201_CREATED,
    summary="Add a medication",
)
def add_medication(payload: MedicationCreate, store: JournalStore) -> Medication:
    return journal.add_medication(store, payload)


@router.patch("/{medication_id}", response_model=Medication, summary="Edit a medication")
def update_medication(
    medication_id: str, payload: MedicationUpdate, store: JournalStore
) -> Medication:
    try:
        return journal.update_medication(store, medication_id, payload)
    except journal.RecordNotFoundError as exc:
        raise to_http_error(exc)


@router.delete(
    "/{medication_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a medication",
)
def delete_medication(medication_id: str, store: JournalStore) -> None:
    try:
        journal.delete_medication(store, medication_id)
    except journal.RecordNotFoundError as exc:
        raise to_http_error(exc)
