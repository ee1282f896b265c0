import uuid
from typing import List

from fastapi import APIRouter, Depends, Query, status

from codeitout.business.services import ProblemService, get_current_user, get_problem_service
from codeitout.config import logger
from codeitout.data.schemas import (
    MessageResponse,
    ProblemCreate,
    ProblemCreatedResponse,
    ProblemResponse,
    User,
)
from codeitout.errors import NotImplementedException

problem_logger = logger.getChild("problem")
problem_router = APIRouter(prefix="/problems", tags=["problems"])


@problem_router.post(
    "",
    response_model=ProblemCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a problem",
    description="Runs every reference solution against every test case on Judge0 "
    "and stores the problem only if all of them pass. Admins only.",
)
async def create_problem(
    problem_data: ProblemCreate,
    current_user: User = Depends(get_current_user),
    problem_service: ProblemService = Depends(get_problem_service),
):
    problem_logger.info(
        f"Create problem request '{problem_data.title}' from user ID: {current_user.id}"
    )
    problem = await problem_service.validate_and_create_problem(current_user, problem_data)
    return ProblemCreatedResponse(
        message="Problem created successfully",
        problem=ProblemResponse.model_validate(problem),
    )


@problem_router.get(
    "",
    response_model=List[ProblemResponse],
    summary="List problems",
    description="Lists stored problems, newest first.",
)
async def list_problems(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    problem_service: ProblemService = Depends(get_problem_service),
):
    problem_logger.info(f"Listing problems with skip: {skip}, limit: {limit}")
    problems = await problem_service.list_problems(skip=skip, limit=limit)
    return [ProblemResponse.model_validate(problem) for problem in problems]


@problem_router.get(
    "/solved",
    summary="List problems solved by the current user",
    responses={status.HTTP_501_NOT_IMPLEMENTED: {"description": "Not implemented"}},
)
async def list_solved_problems(current_user: User = Depends(get_current_user)):
    raise NotImplementedException(
        detail="Solved problems are not tracked by this service"
    )


@problem_router.get(
    "/{problem_id}",
    response_model=ProblemResponse,
    summary="Get a problem",
)
async def get_problem(
    problem_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    problem_service: ProblemService = Depends(get_problem_service),
):
    problem_logger.info(f"Fetching problem ID: {problem_id}")
    problem = await problem_service.get_problem(problem_id)
    return ProblemResponse.model_validate(problem)


@problem_router.put(
    "/{problem_id}",
    response_model=ProblemCreatedResponse,
    summary="Update a problem",
    description="Revalidates the full problem on Judge0 and replaces the stored one. Admins only.",
)
async def update_problem(
    problem_id: uuid.UUID,
    problem_data: ProblemCreate,
    current_user: User = Depends(get_current_user),
    problem_service: ProblemService = Depends(get_problem_service),
):
    problem_logger.info(f"Updating problem ID: {problem_id}")
    problem = await problem_service.validate_and_update_problem(
        current_user, problem_id, problem_data
    )
    return ProblemCreatedResponse(
        message="Problem updated successfully",
        problem=ProblemResponse.model_validate(problem),
    )


@problem_router.delete(
    "/{problem_id}",
    response_model=MessageResponse,
    summary="Delete a problem",
    description="Admins only.",
)
async def delete_problem(
    problem_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    problem_service: ProblemService = Depends(get_problem_service),
):
    problem_logger.info(f"Deleting problem ID: {problem_id}")
    await problem_service.delete_problem(current_user, problem_id)
    return MessageResponse(message=f"Problem {problem_id} deleted successfully")
