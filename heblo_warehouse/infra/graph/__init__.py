"""전이 그래프 유틸리티."""
