"""Core 모듈 - 설정, 모델, 예외."""
