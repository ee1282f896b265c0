import uuid
from typing import Callable, List, Optional, Tuple

from fastapi import Depends

from codeitout.business.services.languages import get_judge0_language_id
from codeitout.config import logger
from codeitout.data.repositories import (
    JudgeClient,
    ProblemRepository,
    get_judge_client,
    get_problem_repository,
)
from codeitout.data.schemas import (
    Problem,
    ProblemCreate,
    ReferenceSolution,
    SubmissionUnit,
    User,
    UserRole,
)
from codeitout.errors import (
    BadRequestException,
    TestCaseFailedException,
    UnauthorizedException,
    UnsupportedLanguageException,
)

problem_logger = logger.getChild("problem")


class ProblemService:
    """
    Validates problem drafts against Judge0 before they reach the problem store.

    A draft is stored only if every reference solution passes every test case.
    Languages are checked in the order the draft lists them and test cases in
    sequence order, so the same invalid draft always reports the same failure.
    """

    def __init__(
        self,
        judge_client: JudgeClient,
        problem_repository: ProblemRepository,
        resolve_language_id: Callable[[str], Optional[int]] = get_judge0_language_id,
    ):
        self.judge_client = judge_client
        self.problem_repository = problem_repository
        self.resolve_language_id = resolve_language_id

    async def validate_and_create_problem(
        self, requester: User, draft: ProblemCreate
    ) -> Problem:
        self._ensure_admin(requester)
        problem_logger.info(
            f"Validating new problem '{draft.title}' for user ID: {requester.id}"
        )

        await self.validate_reference_solutions(draft)

        problem = await self.problem_repository.create_problem(draft, requester.id)
        problem_logger.info(f"Problem created: {problem.id} by user ID: {requester.id}")
        return problem

    async def validate_and_update_problem(
        self, requester: User, problem_id: uuid.UUID, draft: ProblemCreate
    ) -> Problem:
        self._ensure_admin(requester)
        # Fail fast on an unknown id before spending judge time
        await self.problem_repository.get_problem(problem_id)
        problem_logger.info(f"Revalidating problem {problem_id}")

        await self.validate_reference_solutions(draft)

        return await self.problem_repository.update_problem(problem_id, draft)

    async def validate_reference_solutions(self, draft: ProblemCreate) -> None:
        resolved = self._resolve_languages(draft.reference_solutions)

        for solution, language_id in resolved:
            units = [
                SubmissionUnit(
                    source_code=solution.source_code,
                    language_id=language_id,
                    stdin=test_case.input,
                    expected_output=test_case.output,
                )
                for test_case in draft.test_cases
            ]

            tokens = await self.judge_client.submit_batch(units)
            results = await self.judge_client.poll_batch_results(tokens)

            for index, (unit, result) in enumerate(zip(units, results)):
                if not result.is_accepted:
                    problem_logger.warning(
                        f"Reference solution for {solution.language} failed test case "
                        f"{index} with status {result.status.id} "
                        f"({result.status.description})"
                    )
                    raise TestCaseFailedException(
                        language=solution.language,
                        test_case_index=index,
                        stdin=unit.stdin,
                        result=result.model_dump(),
                    )

            problem_logger.info(
                f"Reference solution for {solution.language} passed "
                f"{len(units)} test case(s)"
            )

    async def get_problem(self, problem_id: uuid.UUID) -> Problem:
        return await self.problem_repository.get_problem(problem_id)

    async def list_problems(self, skip: int = 0, limit: int = 100) -> List[Problem]:
        return await self.problem_repository.list_problems(skip=skip, limit=limit)

    async def delete_problem(self, requester: User, problem_id: uuid.UUID) -> None:
        self._ensure_admin(requester)
        await self.problem_repository.delete_problem(problem_id)

    def _resolve_languages(
        self, solutions: List[ReferenceSolution]
    ) -> List[Tuple[ReferenceSolution, int]]:
        # Every language is resolved before anything is sent to the judge
        resolved = []
        seen = set()
        for solution in solutions:
            language_id = self.resolve_language_id(solution.language)
            if language_id is None:
                problem_logger.warning(f"Unsupported language: {solution.language}")
                raise UnsupportedLanguageException(solution.language)
            if language_id in seen:
                raise BadRequestException(
                    detail=f"Duplicate reference solution for language: {solution.language}"
                )
            seen.add(language_id)
            resolved.append((solution, language_id))
        return resolved

    @staticmethod
    def _ensure_admin(requester: User) -> None:
        if requester.role != UserRole.ADMIN:
            problem_logger.warning(
                f"Problem write rejected: user ID {requester.id} is not an admin"
            )
            raise UnauthorizedException(detail="Access denied - Admins only")


def get_problem_service(
    judge_client: JudgeClient = Depends(get_judge_client),
    problem_repository: ProblemRepository = Depends(get_problem_repository),
) -> ProblemService:
    return ProblemService(judge_client, problem_repository)
