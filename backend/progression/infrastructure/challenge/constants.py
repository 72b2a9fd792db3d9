"""
챌린지 기준 수치 상수.
진행도 규칙(rules)과 기본 카탈로그에서 사용하는 값들을 한 곳에서 관리한다.
"""
# four_day_reset: 하루로 인정되는 최소 세션 길이 (20분)
LONG_SESSION_SECONDS = 20 * 60

# blink_master: blink_score 초과 기준
HIGH_FOCUS_BLINK_SCORE = 80

# stone_wall: stillness_percent 초과 기준
HIGH_STILLNESS_PERCENT = 90

# ruthless_survivor 잠금 해제: 누적 완료 세션 수
RUTHLESS_UNLOCK_SESSIONS = 10

# blink_master 잠금 해제: 누적 완료 세션 수
BLINK_MASTER_UNLOCK_SESSIONS = 5
