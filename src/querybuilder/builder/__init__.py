"""SQL 문장 조립기 모듈."""
