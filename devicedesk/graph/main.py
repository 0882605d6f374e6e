from typing import Literal
from langgraph.graph import StateGraph, END
from devicedesk.graph.state import ChatTurnState
from devicedesk.graph.nodes.understanding import UnderstandingNode
from devicedesk.graph.nodes.workflow_node import WorkflowNode
from devicedesk.graph.nodes.reply import ReplyNode
from devicedesk.intent.base import BaseClassifier

# Conditional Logic
def route_intent(state: ChatTurnState) -> Literal["workflow", "reply"]:
    if state.get("route") == "workflow":
        return "workflow"
    return "reply"

def route_after_workflow(state: ChatTurnState) -> Literal["reply", "end"]:
    if state.get("route") == "reply" and not state.get("final_response"):
        return "reply"
    return "end"

def build_chat_graph(classifier: BaseClassifier):
    graph = StateGraph(ChatTurnState)

    graph.add_node("understanding", UnderstandingNode(classifier))
    graph.add_node("workflow", WorkflowNode())
    graph.add_node("reply", ReplyNode())

    # Set Entry Point
    graph.set_entry_point("understanding")

    # Add Edges
    graph.add_conditional_edges(
        "understanding",
        route_intent,
        {
            "workflow": "workflow",
            "reply": "reply"
        }
    )
    graph.add_conditional_edges(
        "workflow",
        route_after_workflow,
        {
            "reply": "reply",
            "end": END
        }
    )
    graph.add_edge("reply", END)

    # Compile
    return graph.compile()
