"""
Disease endpoints.

These routes expose CRUD and search operations for diseases:

* ``POST   /diseases``            create (the body must not carry an id)
* ``PUT    /diseases``            update (the body must carry an id)
* ``GET    /diseases``            one page of diseases
* ``GET    /diseases/{id}``       one disease, or 404
* ``DELETE /diseases/{id}``       delete; succeeds even if already gone
* ``GET    /_search/diseases``    ranked search, ``?query=``

Identifier checks happen here, before the service is called.  Listing
and search responses always carry ``X-Total-Count`` and ``Link``.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Response, status

from amachou_api.app.core.config import settings
from amachou_api.app.core.db import SQLITE_MAX_INTEGER, SQLITE_MIN_INTEGER
from amachou_api.app.core.errors import BadRequestAlertException
from amachou_api.app.core.headers import (
    create_entity_creation_alert,
    create_entity_deletion_alert,
    create_entity_update_alert,
)
from amachou_api.app.core.pagination import (
    PageRequest,
    generate_pagination_headers,
    generate_search_pagination_headers,
    get_page_request,
)
from amachou_api.app.schemas.disease import DiseaseDTO
from amachou_api.app.services.disease_service import (
    DiseaseNotFoundError,
    DiseaseService,
    get_disease_service,
)

logger = logging.getLogger(__name__)

ENTITY_NAME = "disease"

router = APIRouter()
search_router = APIRouter()


def _resource_url() -> str:
    return f"{settings.api_prefix}/diseases"


@router.post("/diseases", response_model=DiseaseDTO, status_code=status.HTTP_201_CREATED)
def create_disease(
    disease: DiseaseDTO,
    response: Response,
    service: DiseaseService = Depends(get_disease_service),
) -> DiseaseDTO:
    """Create a new disease.

    Returns 201 with the saved disease and a ``Location`` header, or
    400 (``idexists``) if the body already has an id.
    """
    logger.debug("REST request to save Disease : %s", disease)
    if disease.id is not None:
        raise BadRequestAlertException("A new disease cannot already have an ID", ENTITY_NAME, "idexists")
    result = service.save(disease)
    response.headers["Location"] = f"{_resource_url()}/{result.id}"
    response.headers.update(create_entity_creation_alert(ENTITY_NAME, str(result.id)))
    return result


@router.put("/diseases", response_model=DiseaseDTO)
def update_disease(
    disease: DiseaseDTO,
    response: Response,
    service: DiseaseService = Depends(get_disease_service),
) -> DiseaseDTO:
    """Update an existing disease.

    Returns 400 (``idnull``) if the body has no id and 404 if no
    disease has that id.
    """
    logger.debug("REST request to update Disease : %s", disease)
    if disease.id is None:
        raise BadRequestAlertException("Invalid id", ENTITY_NAME, "idnull")
    try:
        result = service.save(disease)
    except DiseaseNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    response.headers.update(create_entity_update_alert(ENTITY_NAME, str(disease.id)))
    return result


@router.get("/diseases", response_model=List[DiseaseDTO])
def get_all_diseases(
    response: Response,
    page_request: PageRequest = Depends(get_page_request),
    service: DiseaseService = Depends(get_disease_service),
) -> List[DiseaseDTO]:
    logger.debug("REST request to get a page of Diseases")
    page = service.find_all(page_request)
    response.headers.update(generate_pagination_headers(page, _resource_url()))
    return page.content


@router.get("/diseases/{disease_id}", response_model=DiseaseDTO)
def get_disease(
    disease_id: int = Path(..., ge=SQLITE_MIN_INTEGER, le=SQLITE_MAX_INTEGER),
    service: DiseaseService = Depends(get_disease_service),
) -> DiseaseDTO:
    logger.debug("REST request to get Disease : %s", disease_id)
    disease = service.find_one(disease_id)
    if disease is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Disease not found")
    return disease


@router.delete("/diseases/{disease_id}", status_code=status.HTTP_200_OK)
def delete_disease(
    disease_id: int = Path(..., ge=SQLITE_MIN_INTEGER, le=SQLITE_MAX_INTEGER),
    service: DiseaseService = Depends(get_disease_service),
) -> Response:
    """Delete a disease.  Always 200, whether or not it existed."""
    logger.debug("REST request to delete Disease : %s", disease_id)
    service.delete(disease_id)
    return Response(
        status_code=status.HTTP_200_OK,
        headers=create_entity_deletion_alert(ENTITY_NAME, str(disease_id)),
    )


@search_router.get("/_search/diseases", response_model=List[DiseaseDTO])
def search_diseases(
    response: Response,
    query: str = Query(..., description="Free‑text query"),
    page_request: PageRequest = Depends(get_page_request),
    service: DiseaseService = Depends(get_disease_service),
) -> List[DiseaseDTO]:
    """Search diseases; ``*`` at the end of a word matches a prefix."""
    logger.debug("REST request to search for a page of Diseases for query %s", query)
    page = service.search(query, page_request)
    response.headers.update(
        generate_search_pagination_headers(query, page, f"{settings.api_prefix}/_search/diseases")
    )
    return page.content
