import csv
import sys

from sqlalchemy.orm import Session
from database.db import SessionLocal
from schemas.questions import QuestionCreate
from services.question_service import QuestionService

CSV_PATH = "data/questions.csv"  # ✅ 파일 경로
# 컬럼: bank_id,type,content,options,answer,score,difficulty,analysis


def migrate_questions(csv_path: str = CSV_PATH, created_by: int = 1) -> int:
    db: Session = SessionLocal()
    service = QuestionService(db)
    count = 0

    try:
        with open(csv_path, newline="", encoding="utf-8-sig") as csvfile:
            reader = csv.DictReader(csvfile)
            for row in reader:
                spec = QuestionCreate(
                    bank_id=int(row["bank_id"]),                # 소속 문제은행 ID
                    type=row["type"],                          # 문항 유형
                    content=row["content"],                    # 문제 내용
                    options=row.get("options") or "",          # 보기
                    answer=row["answer"],                      # 정답 (가공하지 않음)
                    score=float(row["score"]),                 # 배점
                    difficulty=row.get("difficulty") or "",    # 난이도
                    analysis=row.get("analysis") or None,      # 해설
                )
                service.create_question(spec, created_by)
                count += 1
    finally:
        db.close()

    print(f"✅ 문항 CSV → DB 마이그레이션 완료 ({count}건)")
    return count


if __name__ == "__main__":
    migrate_questions(*sys.argv[1:2])
