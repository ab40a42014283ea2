from sqlalchemy import func, select
from sqlalchemy.orm import Session

from models.exam_records import ExamRecord, RECORD_GRADED
from schemas.exam_records import ExamStats, RecentAttempt
from services.base import reading

RECENT_LIMIT = 5


class StatsService:
    def __init__(self, db: Session):
        self.db = db

    def stats(self, user_id: int) -> ExamStats:
        """
        개인 응시 통계
        - count/total/avg/max/min: 채점 완료(graded) 기록만 집계
        - recent_attempts: 상태와 무관하게 시작 시각 기준 최근 5건
        """
        with reading(self.db):
            count, total, max_score, min_score = self.db.execute(
                select(
                    func.count(ExamRecord.id),
                    func.coalesce(func.sum(ExamRecord.total_score), 0),
                    func.coalesce(func.max(ExamRecord.total_score), 0),
                    func.coalesce(func.min(ExamRecord.total_score), 0),
                ).where(ExamRecord.user_id == user_id, ExamRecord.status == RECORD_GRADED)
            ).one()

            recent = self.db.scalars(
                select(ExamRecord)
                .where(ExamRecord.user_id == user_id)
                .order_by(ExamRecord.start_time.desc(), ExamRecord.id.desc())
                .limit(RECENT_LIMIT)
            ).all()

        total = float(total or 0)
        return ExamStats(
            count=count,
            total_score=total,
            avg_score=total / count if count > 0 else 0.0,
            max_score=float(max_score or 0),
            min_score=float(min_score or 0),
            recent_attempts=[RecentAttempt.model_validate(r) for r in recent],
        )
