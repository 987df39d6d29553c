from answerlens.analysis.analyzer import AIAnalyzer
from answerlens.analysis.base import BaseAnalyzer
from answerlens.analysis.factory import AnalyzerFactory

__all__ = ["AIAnalyzer", "AnalyzerFactory", "BaseAnalyzer"]
