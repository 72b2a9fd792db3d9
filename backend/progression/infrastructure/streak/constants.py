"""
연속 달성(Streak) 상수.
"""
# StreakData 저장 키 (단일 레코드, 덮어쓰기만 하고 삭제하지 않음)
STREAK_STORAGE_KEY = "@dawg_streak"

# 연속 유지 조건: 마지막 세션 일자와의 달력 일수 차이가 정확히 이 값이면 +1
STREAK_CONTINUE_DAYS = 1

STREAK_EMOJI = "🔥"
STREAK_START_TEXT = "Start Your Streak"
STREAK_PENDING_TEXT = "Don't break it!"
