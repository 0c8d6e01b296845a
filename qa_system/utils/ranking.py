from typing import Dict, List
from qa_system.schemas.statistics import OptionCount

def assign_ranks(options: List[OptionCount]) -> List[OptionCount]:
    """Competition ranking ("1224"): ties share a rank, the next lower count
    takes its 1-based position. Order of ``options`` is preserved."""
    ordered = sorted(options, key=lambda o: (-o.count, o.serial_num))

    rank_by_serial: Dict[int, int] = {}
    current_rank = 1
    for position, option in enumerate(ordered, start=1):
        if position > 1 and option.count < ordered[position - 2].count:
            current_rank = position
        rank_by_serial[option.serial_num] = current_rank

    for option in options:
        option.rank = rank_by_serial[option.serial_num]
    return options
