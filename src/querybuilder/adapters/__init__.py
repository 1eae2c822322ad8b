"""외부 협력자 어댑터 모듈."""
