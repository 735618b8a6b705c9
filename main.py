"""Timed Assessment Engine - Command Line Interface"""

import argparse
import sys
from pathlib import Path
import logging

logging.basicConfig(
    level=logging.INFO,
    format='%(levelname)s: %(message)s'
)


def print_question(session):
    """Print the current question with its options"""
    question = session.current_question
    chosen = session.answer_for(question.id)

    print(f"\n⏱ {session.time_left_display}  |  "
          f"Question {session.current_index + 1}/{session.question_count}  |  "
          f"✅ {session.answered_count} answered")
    print("-" * 50)
    print(question.text)
    for key, text in question.options.items():
        marker = "●" if key == chosen else "○"
        print(f"  {marker} {key}. {text}")


def print_navigator(session):
    labels = []
    for item in session.navigation_status():
        number = item["index"] + 1
        if item["current"]:
            labels.append(f"👉{number}")
        elif item["answered"]:
            labels.append(f"✅{number}")
        else:
            labels.append(f"⬜{number}")
    print("  ".join(labels))


def print_result(session):
    result = session.result
    reason = "time ran out" if session.submission_reason.value == "timeout" else "submitted"

    print("\n" + "=" * 50)
    print(f"📊 RESULT — {session.assessment.title} ({reason})")
    print("=" * 50)
    print(f"Score: {result.correct_count}/{result.total_questions} ({result.percentage}%)")

    for i, outcome in enumerate(result.outcomes, start=1):
        question = outcome.question
        icon = "✅" if outcome.correct else "❌"
        chosen = question.options[outcome.chosen_option] if outcome.is_answered else "Not answered"
        print(f"\n{icon} Q{i}. {question.text}")
        print(f"   Your answer: {chosen}")
        print(f"   Correct answer: {question.options[question.correct_answer]}")
        if outcome.explanation:
            print(f"   Explanation: {outcome.explanation}")

    print("\n📚 By Subject:")
    for subject, data in result.subject_breakdown().items():
        print(f"   {subject}: {data['correct']}/{data['total']}")


def cmd_validate(args):
    """Validate an assessment file"""
    from storage.json_storage import AssessmentStorage
    from engine.errors import AssessmentError

    try:
        assessment = AssessmentStorage().load_assessment(Path(args.file))
    except AssessmentError as e:
        print(f"❌ {e}")
        return 1

    print(f"✅ {assessment.title} ({assessment.id})")
    print(f"   Questions: {assessment.question_count}")
    print(f"   Duration: {assessment.duration_seconds // 60} min {assessment.duration_seconds % 60} s")

    subjects = {}
    for q in assessment.questions:
        subjects[q.subject] = subjects.get(q.subject, 0) + 1
    for subject, count in subjects.items():
        print(f"   {subject}: {count}")
    return 0


HELP_TEXT = """Commands:
  a <key>   answer the current question
  n / p     next / previous question
  g <num>   go to question number
  l         show question navigator
  s         submit
  h         help"""


def cmd_take(args):
    """Take an assessment in the terminal"""
    from storage.json_storage import AssessmentStorage, ResultStorage
    from engine.errors import AssessmentError
    from engine.session_controller import SessionController, SubmissionReason

    try:
        assessment = AssessmentStorage().load_assessment(Path(args.file))
    except AssessmentError as e:
        print(f"❌ {e}")
        return 1

    def announce(session):
        if session.submission_reason is SubmissionReason.TIMEOUT:
            print("\n⏰ Time is up — your test was submitted. Press Enter to see results.")

    controller = SessionController(on_submitted=announce)

    try:
        session = controller.start(assessment, entitlement_granted=not args.not_entitled,
                                   candidate_id=args.candidate)
    except AssessmentError as e:
        print(f"❌ Test unavailable: {e}")
        return 1

    print(f"\n📝 {assessment.title}")
    print(HELP_TEXT)

    try:
        while session.is_active:
            print_question(session)
            try:
                line = input("> ").strip()
            except EOFError:
                line = "s"

            if not session.is_active:
                break

            command, _, argument = line.partition(" ")
            argument = argument.strip()

            try:
                if command == "a":
                    controller.select_answer(session, session.current_question.id, argument)
                elif command == "n":
                    controller.next(session)
                elif command == "p":
                    controller.previous(session)
                elif command == "g":
                    if not argument.isdigit():
                        print("⚠️  Usage: g <question number>")
                        continue
                    controller.go_to(session, int(argument) - 1)
                elif command == "l":
                    print_navigator(session)
                elif command == "s":
                    if session.unanswered_count > 0:
                        print(f"⚠️  You have {session.unanswered_count} unanswered questions!")
                        confirm = input("Submit anyway? [y/N] ").strip().lower()
                        if confirm != "y":
                            continue
                    controller.submit(session)
                else:
                    print(HELP_TEXT)
            except AssessmentError as e:
                print(f"⚠️  {e}")
    except KeyboardInterrupt:
        print("\n🛑 Interrupted — submitting.")
        if session.is_active:
            controller.submit(session)
    finally:
        controller.stop_all()

    print_result(session)

    if args.save:
        path = ResultStorage().save_result(session)
        print(f"\n💾 Result saved to {path}")
    return 0


def cmd_serve(args):
    """Start web interface"""
    import subprocess

    print("🚀 Starting Timed Assessment Engine...")
    print(f"   Open http://localhost:{args.port} in your browser")

    ui_path = Path(__file__).parent / "ui" / "app.py"
    command = [
        sys.executable, "-m", "streamlit", "run",
        str(ui_path),
        "--server.port", str(args.port),
    ]
    if args.file:
        command += ["--", "--file", str(Path(args.file).resolve())]

    return subprocess.run(command).returncode


def main():
    parser = argparse.ArgumentParser(description="Timed Assessment Engine")
    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Validate command
    validate_parser = subparsers.add_parser('validate', help='Validate an assessment file')
    validate_parser.add_argument('file', help='Assessment JSON file')
    validate_parser.set_defaults(func=cmd_validate)

    # Take command
    take_parser = subparsers.add_parser('take', help='Take an assessment in the terminal')
    take_parser.add_argument('file', help='Assessment JSON file')
    take_parser.add_argument('--candidate', '-c', help='Candidate identity')
    take_parser.add_argument('--not-entitled', action='store_true',
                             help='Start without entitlement (access is refused)')
    take_parser.add_argument('--save', action='store_true', help='Save the result record')
    take_parser.set_defaults(func=cmd_take)

    # Serve command
    serve_parser = subparsers.add_parser('serve', help='Start web UI')
    serve_parser.add_argument('--file', '-f', help='Assessment JSON file')
    serve_parser.add_argument('--port', type=int, default=8501)
    serve_parser.set_defaults(func=cmd_serve)

    args = parser.parse_args()

    if args.command:
        return args.func(args)
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
