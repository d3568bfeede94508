from __future__ import annotations

import logging
import random
from typing import List, Optional

from .constants import OPERAND_B_CAP, OPERAND_BASE, OPERAND_STEP
from .enums import Op
from .models import Problem

logger = logging.getLogger(__name__)


def operand_max(difficulty: int) -> int:
    return OPERAND_BASE + OPERAND_STEP * max(1, int(difficulty))


def unlocked_ops(difficulty: int) -> List[Op]:
    ops = [Op.ADD]
    if difficulty >= 2:
        ops.append(Op.SUB)
    if difficulty >= 3:
        ops.append(Op.MUL)
    return ops


def _evaluate(a: int, b: int, op: Op) -> int:
    if op is Op.ADD:
        return a + b
    if op is Op.SUB:
        return a - b
    return a * b


def generate_problem(difficulty: int = 1, rng: Optional[random.Random] = None) -> Problem:
    """Draw a problem for the given difficulty.

    ``a`` is drawn from ``1..max`` and ``b`` from ``1..min(max, 10)`` where
    ``max = 5 + 5 * difficulty``. Subtraction may produce a negative answer.
    """
    rng = rng or random
    hi = operand_max(difficulty)
    a = rng.randint(1, hi)
    b = rng.randint(1, min(hi, OPERAND_B_CAP))
    op = rng.choice(unlocked_ops(difficulty))
    problem = Problem(a=a, b=b, op=op, answer=_evaluate(a, b, op))
    logger.debug("Generated %s (answer %d) at difficulty %d", problem.text(), problem.answer, difficulty)
    return problem


__all__ = ["generate_problem", "operand_max", "unlocked_ops"]
