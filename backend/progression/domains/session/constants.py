"""
세션 로그·통계 상수.
"""
# Gateway 저장 키 (기존 앱 데이터와 호환)
SESSIONS_KEY = "@dawg_sessions"
START_DATE_KEY = "rawdawg_start_date"
CELEBRATED_MILESTONES_KEY = "rawdawg_celebrated_milestones"

# 90일 리와이어 프로그램
REWIRE_PROGRAM_DAYS = 90
MILESTONE_DAYS = (1, 3, 7, 14, 30, 60, 90)

# 추세: 최근 N개 스코어링 세션 vs 그 이전 N개
TREND_WINDOW = 7

# 일반인 기준치 (Brain vs Average)
BASELINE_STILLNESS_PERCENT = 75
BASELINE_BLINKS_PER_MINUTE = 17
BASELINE_DURATION_SECONDS = 300
