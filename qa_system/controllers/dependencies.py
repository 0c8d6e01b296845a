from qa_system.services.answer_service import answer_service
from qa_system.services.statistics_service import statistics_service

# Service providers shared by the routers, overridable through app.dependency_overrides
def get_answer_service():
    return answer_service

def get_statistics_service():
    return statistics_service
