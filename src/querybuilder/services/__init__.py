"""UI 계층 서비스 모듈."""
