from typing import Dict, Iterable, List


def rank_students(marks: Iterable) -> List[str]:
    """
    반 전체 성적 행 → 총점 내림차순 학생 ID 목록
    - 동점은 처음 등장한 순서 유지 (공동 석차 없음: 1, 2, 3 ...)
    """
    totals: Dict[str, float] = {}
    for mark in marks:
        totals[mark.student_id] = totals.get(mark.student_id, 0) + mark.total_score

    # sorted 는 안정 정렬 (reverse=True 여도 동점 순서 보존)
    ordered = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [student_id for student_id, _ in ordered]


class ClassRanking:
    """반 x 시험 단위로 한 번 계산해서 학생별 처리에 재사용하는 석차표"""

    def __init__(self, ordered_student_ids: List[str]):
        self.ordered_student_ids = ordered_student_ids
        self._positions = {sid: idx + 1 for idx, sid in enumerate(ordered_student_ids)}

    @classmethod
    def from_marks(cls, marks: Iterable) -> "ClassRanking":
        return cls(rank_students(marks))

    def position(self, student_id: str) -> int:
        # 성적이 없는 학생은 0
        return self._positions.get(student_id, 0)

    def __len__(self):
        return len(self.ordered_student_ids)
