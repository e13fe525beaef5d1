from pydantic import BaseModel
from typing import Dict, List, Literal, Optional

from serendipia.schemas.dashboard import MonthFlowPoint


AnalysisType = Literal["summary", "insights", "recommendations", "spending", "custom"]


class AnalysisRequest(BaseModel):
    analysis_type: AnalysisType = "summary"
    custom_prompt: Optional[str] = None
    period: str = "all"
    start_date: Optional[str] = None
    end_date: Optional[str] = None


class FinancialAnalysis(BaseModel):
    summary: str
    insights: List[str] = []
    recommendations: List[str] = []
    spending_by_category: Dict[str, float] = {}
    monthly_trend: List[MonthFlowPoint] = []
