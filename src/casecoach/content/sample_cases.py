"""
Sample case templates loaded into a fresh store for the demo server.
"""

from __future__ import annotations

from typing import List

from ..core.model import CaseTemplate


def build_sample_cases() -> List[CaseTemplate]:
    """Fresh CaseTemplate objects (new ids on every call)."""
    return [
        CaseTemplate(
            title="Coffee Chain Profitability",
            description="A national coffee chain has seen profits fall 15% over two years "
                        "despite stable revenue. Find the cause and recommend a fix.",
            industry="retail",
            difficulty="beginner",
            estimated_duration=30,
            system_prompt="You are an interviewer running a profitability case. "
                          "Costs have risen in rent and labor; revenue is flat.",
            initial_message="Our client is a coffee chain with 800 stores. Profits are down "
                            "15% in two years while revenue held steady. How would you approach this?",
            tags=["profitability", "retail", "costs"],
        ),
        CaseTemplate(
            title="Telehealth Market Entry",
            description="A regional hospital group is considering launching a telehealth "
                        "service. Should they enter, and how?",
            industry="healthcare",
            difficulty="intermediate",
            estimated_duration=45,
            system_prompt="You are an interviewer running a market entry case. "
                          "The market grows 20% a year; two large competitors hold 60% share.",
            initial_message="A hospital group wants to know whether to launch telehealth. "
                            "What would you need to know to make a recommendation?",
            tags=["market entry", "healthcare"],
        ),
        CaseTemplate(
            title="Battery Maker Acquisition",
            description="A private equity fund is evaluating the acquisition of a lithium "
                        "battery manufacturer. Assess the deal.",
            industry="energy",
            difficulty="advanced",
            estimated_duration=60,
            system_prompt="You are an interviewer running an M&A case. The target has "
                          "strong margins but depends on a single automotive customer.",
            initial_message="Our client is a PE fund looking at buying a battery manufacturer. "
                            "How would you evaluate whether this is a good investment?",
            tags=["m&a", "private equity", "energy"],
        ),
    ]
