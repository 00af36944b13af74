from fastapi import Request

from src.work_queue.base import WorkQueue


def get_work_queue(request: Request) -> WorkQueue:
    return request.app.state.work_queue
