"""
API 라우트 패키지

각 기능별 라우터 모듈:
- health: 헬스 체크
- invoices: 세금계산서 생성/전기/취소
- journals: 일반 전표 생성/전기/취소
- reports: 재무상태표, 손익계산서, 시산표, 잔액
- accounts: 계정과목
"""
