import uuid
from typing import List

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel.ext.asyncio.session import AsyncSession

from codeitout.config import logger
from codeitout.data.repositories.database import get_session
from codeitout.data.schemas import Problem, ProblemCreate, utc_now
from codeitout.errors import PersistenceException, ResourceNotFoundException

problem_logger = logger.getChild("problem_repository")


class ProblemRepository:
    """Problem store backed by the problems table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_problem(self, draft: ProblemCreate, user_id: uuid.UUID) -> Problem:
        new_problem = Problem(**draft.to_record(), user_id=user_id)
        self.session.add(new_problem)
        try:
            await self.session.commit()
            await self.session.refresh(new_problem)
        except SQLAlchemyError as e:
            await self.session.rollback()
            problem_logger.error(f"Error creating problem '{draft.title}': {str(e)}")
            raise PersistenceException(detail="Failed to create problem")

        problem_logger.info(f"Created problem with ID: {new_problem.id}")
        return new_problem

    async def get_problem(self, problem_id: uuid.UUID) -> Problem:
        try:
            problem = await self.session.get(Problem, problem_id)
        except SQLAlchemyError as e:
            problem_logger.error(f"Error retrieving problem {problem_id}: {str(e)}")
            raise PersistenceException(detail="Failed to retrieve problem")

        if not problem:
            raise ResourceNotFoundException(detail=f"Problem {problem_id} not found")
        return problem

    async def list_problems(self, skip: int = 0, limit: int = 100) -> List[Problem]:
        try:
            result = await self.session.execute(
                select(Problem)
                .order_by(Problem.created_at.desc())
                .offset(skip)
                .limit(limit)
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            problem_logger.error(f"Error listing problems: {str(e)}")
            raise PersistenceException(detail="Failed to list problems")

    async def update_problem(self, problem_id: uuid.UUID, draft: ProblemCreate) -> Problem:
        problem = await self.get_problem(problem_id)
        for field, value in draft.to_record().items():
            setattr(problem, field, value)
        problem.updated_at = utc_now()

        self.session.add(problem)
        try:
            await self.session.commit()
            await self.session.refresh(problem)
        except SQLAlchemyError as e:
            await self.session.rollback()
            problem_logger.error(f"Error updating problem {problem_id}: {str(e)}")
            raise PersistenceException(detail="Failed to update problem")

        problem_logger.info(f"Updated problem with ID: {problem_id}")
        return problem

    async def delete_problem(self, problem_id: uuid.UUID) -> None:
        problem = await self.get_problem(problem_id)
        try:
            await self.session.delete(problem)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            problem_logger.error(f"Error deleting problem {problem_id}: {str(e)}")
            raise PersistenceException(detail="Failed to delete problem")

        problem_logger.info(f"Deleted problem with ID: {problem_id}")


def get_problem_repository(
    session: AsyncSession = Depends(get_session),
) -> ProblemRepository:
    return ProblemRepository(session)
