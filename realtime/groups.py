def user_notify_group(user_id) -> str:
    # 수신자별 알림 그룹. Channels 그룹 이름은 ^[A-Za-z0-9._-]+$ 이어야 하므로 ':' 대신 '.' 사용
    return f"notify.{user_id}"
