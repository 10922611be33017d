import threading

from live_quiz.core.models import QuestionType
from live_quiz.core.quiz_manager import QuizManager
from live_quiz.core.timers import ThreadingTimerScheduler


def test_scheduled_callback_fires_on_a_background_thread():
    scheduler = ThreadingTimerScheduler()
    fired = threading.Event()

    scheduler.schedule(0.01, fired.set)

    assert fired.wait(timeout=2)
    scheduler.shutdown()


def test_failing_callback_does_not_break_later_timers():
    scheduler = ThreadingTimerScheduler()
    fired = threading.Event()

    def explode():
        raise RuntimeError("boom")

    scheduler.schedule(0.01, explode)
    scheduler.schedule(0.02, fired.set)

    assert fired.wait(timeout=2)
    scheduler.shutdown()


def test_shutdown_cancels_pending_and_drops_new_timers():
    scheduler = ThreadingTimerScheduler()
    fired = threading.Event()
    scheduler.schedule(60, fired.set)
    assert scheduler.pending_count() == 1

    scheduler.shutdown()
    scheduler.schedule(0.01, fired.set)

    assert scheduler.pending_count() == 0
    assert not fired.wait(timeout=0.1)


def test_manager_shutdown_stops_real_timers():
    scheduler = ThreadingTimerScheduler()
    manager = QuizManager(scheduler=scheduler)
    quiz = manager.create_quiz("Timed", 5, "2026-10-18", "09:00", default_time_per_question=60)
    manager.add_question(quiz.id, QuestionType.FILL, "Say hi", "hi")

    manager.start_quiz(quiz.id)
    assert scheduler.pending_count() == 1

    manager.shutdown()
    assert scheduler.pending_count() == 0
