"""Anela Heblo 창고 백오피스 코어.

운송 박스(TransportBox) 생명주기 상태 머신과
카탈로그 병합 스케줄러(CatalogMergeScheduler)를 제공한다.
"""
