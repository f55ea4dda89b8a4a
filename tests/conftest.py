import sys
import os

# 프로젝트 루트를 sys.path에 추가 (app.py, pcs_routes.py 등 최상위 모듈)
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)
