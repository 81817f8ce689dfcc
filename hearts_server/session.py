"""Core session state machine: waiting room, rounds, confinement, evaluation."""

import asyncio
from typing import Optional
from hearts_shared.constants import (
    Mark, Phase, Outcome, MessageType, ROUND_DURATION_MS,
    CONFINEMENT_DURATION_MS, INITIAL_BOT_COUNT, ELIMINATED_REASON,
    SURVIVED_MESSAGE, SURVIVORS_WIN_MESSAGE, JACK_WINS_MESSAGE,
)
from hearts_server.registry import Player, PlayerRegistry
from hearts_server.roles import assign_mark, assign_jack
from hearts_server.triggers import TriggerSlot, TaskPool
from hearts_server import bots


class Session:
    """Authoritative session state. Drives the entire game flow.

    ``notifier`` is the transport: it must provide
    ``broadcast(msg_type, payload, exclude=None)`` and
    ``unicast(player_id, msg_type, payload)``. ``clock`` schedules the
    deferred phase changes; it defaults to the running asyncio loop.
    """

    def __init__(self, notifier, clock=None,
                 round_duration_ms: int = ROUND_DURATION_MS,
                 confinement_duration_ms: int = CONFINEMENT_DURATION_MS,
                 bot_count: int = INITIAL_BOT_COUNT):
        self.notifier = notifier
        self._clock = clock
        self.round_duration_ms = round_duration_ms
        self.confinement_duration_ms = confinement_duration_ms
        self.registry = PlayerRegistry()
        self.current_round: int = 1
        self.waiting_room: bool = True
        self.in_progress: bool = False
        self.phase: Phase = Phase.WAITING
        self.round_started_at: Optional[float] = None
        self.confinement_started_at: Optional[float] = None
        self.outcome: Optional[Outcome] = None
        self.result_message: Optional[str] = None
        # The two chained phase triggers and the per-bot guess timers
        self.round_trigger = TriggerSlot("round")
        self.confinement_trigger = TriggerSlot("confinement")
        self.bot_guesses = TaskPool()

        for bot_id in bots.bot_ids(bot_count):
            self.registry.add(bot_id, is_bot=True)
            print(f"[session] Bot added: {bot_id}")

    @property
    def clock(self):
        if self._clock is None:
            self._clock = asyncio.get_running_loop()
        return self._clock

    # ------------------------------------------------------------------
    # Participant events
    # ------------------------------------------------------------------

    def join(self, player_id: str) -> Player:
        """Register a new human and bring their client up to date."""
        player = self.registry.add(player_id)
        print(f"[session] Player joined: {player_id}")
        self.notifier.unicast(player_id, MessageType.CURRENT_PLAYERS,
                              self.snapshot(viewer_id=player_id))
        self.notifier.broadcast(MessageType.NEW_PLAYER, player.to_state().to_dict(),
                                exclude=player_id)
        if self.waiting_room:
            self.broadcast_waiting_room()
        else:
            self.send_catch_up(player_id)
        return player

    def leave(self, player_id: str):
        player = self.registry.remove(player_id)
        if player is None:
            return
        print(f"[session] Player left: {player_id}")
        self.bot_guesses.cancel(player_id)
        self.notifier.broadcast(MessageType.DISCONNECT_PLAYER, {"id": player_id})
        if self.waiting_room:
            self.broadcast_waiting_room()
            self.check_all_ready()

    def submit_guess(self, player_id: str, raw_guess) -> Optional[str]:
        """Store a guess. Returns an error message for the submitter, or None."""
        player = self.registry.get(player_id)
        if player is None or not player.alive:
            return None
        if self.phase != Phase.CONFINED:
            return "Guesses are only accepted during confinement"
        try:
            guess = Mark(raw_guess)
        except (ValueError, TypeError):
            # An unreadable guess counts as no guess at all
            player.guess = None
            print(f"[session] Player {player_id} submitted invalid guess: {raw_guess!r}")
            return "Invalid guess"
        player.guess = guess
        print(f"[session] Player {player_id} submitted guess: {guess.value}")
        self.notifier.unicast(player_id, MessageType.GUESS_RECEIVED, {"guess": guess.value})
        return None

    def move(self, player_id: str, x: float, y: float) -> Optional[Player]:
        player = self.registry.get(player_id)
        if player is None:
            return None
        player.move_to(x, y)
        self.notifier.broadcast(MessageType.PLAYER_MOVED,
                                {"id": player_id, "x": player.x, "y": player.y},
                                exclude=player_id)
        return player

    # ------------------------------------------------------------------
    # Waiting room
    # ------------------------------------------------------------------

    def mark_ready(self, player_id: str):
        player = self.registry.get(player_id)
        if player is None or player.is_bot or not player.alive:
            return
        player.ready = True
        if not self.waiting_room:
            return
        print(f"[session] Player {player_id} is ready.")
        self.broadcast_waiting_room()
        self.check_all_ready()

    def all_ready(self) -> bool:
        humans = [p for p in self.registry.humans() if p.alive]
        return bool(humans) and all(p.ready for p in humans)

    def check_all_ready(self) -> bool:
        """Leave the waiting room if every human is ready. Fires at most once."""
        if not self.waiting_room or not self.all_ready():
            return False
        self.waiting_room = False
        print("[session] All players ready, game starting")
        self.notifier.broadcast(MessageType.GAME_STARTING)
        self.start_round()
        return True

    def broadcast_waiting_room(self):
        ready_states = {p.player_id: p.ready for p in self.registry.humans()}
        self.notifier.broadcast(MessageType.WAITING_ROOM_UPDATE, ready_states)

    # ------------------------------------------------------------------
    # Round scheduler
    # ------------------------------------------------------------------

    def start_round(self):
        """Enter the active phase of ``current_round``."""
        self.in_progress = True
        self.phase = Phase.ACTIVE
        self.confinement_trigger.cancel()
        self.bot_guesses.cancel_all()
        print(f"[session] Starting round {self.current_round}")

        for player in self.registry.living():
            player.guess = None
            player.mark = assign_mark()
            if not player.is_bot:
                player.ready = False

        jack = assign_jack(self.registry)
        if jack is not None:
            print(f"[session] Assigned Jack of Hearts: {jack.player_id}")
            self.notifier.broadcast(MessageType.JACK_ASSIGNED, {"id": jack.player_id})
            if not jack.is_bot:
                self.notifier.unicast(jack.player_id, MessageType.JACK_ROLE,
                                      {"mark": jack.mark.value})

        self.round_started_at = self.clock.time()
        self.confinement_started_at = None
        self.notifier.broadcast(MessageType.ROUND_STARTED, {
            "round": self.current_round,
            "duration": self.round_duration_ms,
        })
        self.round_trigger.arm(
            self.clock,
            self.round_duration_ms - self.confinement_duration_ms,
            self.start_confinement,
            self.current_round,
        )

    def start_confinement(self, round_number: int):
        if self.phase != Phase.ACTIVE or round_number != self.current_round:
            return
        self.phase = Phase.CONFINED
        self.round_trigger.cancel()
        self.confinement_started_at = self.clock.time()
        print("[session] Confinement phase started.")
        self.notifier.broadcast(MessageType.CONFINEMENT_STARTED, {
            "duration": self.confinement_duration_ms,
        })
        self.schedule_bot_guesses()
        self.confinement_trigger.arm(
            self.clock,
            self.confinement_duration_ms,
            self.evaluate_guesses,
            round_number,
        )

    def round_status(self) -> dict:
        """Round number and the time actually left, for late joiners."""
        elapsed_ms = (self.clock.time() - self.round_started_at) * 1000
        return {
            "round": self.current_round,
            "duration": max(int(self.round_duration_ms - elapsed_ms), 0),
        }

    def confinement_status(self) -> dict:
        elapsed_ms = (self.clock.time() - self.confinement_started_at) * 1000
        return {"duration": max(int(self.confinement_duration_ms - elapsed_ms), 0)}

    def send_catch_up(self, player_id: str):
        if self.phase == Phase.GAME_OVER:
            self.notifier.unicast(player_id, MessageType.GAME_OVER, {
                "message": self.result_message,
                "winner": self.outcome.value,
            })
            return
        if self.round_started_at is None:
            return
        self.notifier.unicast(player_id, MessageType.ROUND_STARTED, self.round_status())
        if self.phase == Phase.CONFINED:
            self.notifier.unicast(player_id, MessageType.CONFINEMENT_STARTED,
                                  self.confinement_status())

    # ------------------------------------------------------------------
    # Bot guesses
    # ------------------------------------------------------------------

    def schedule_bot_guesses(self):
        self.bot_guesses.cancel_all()
        for player in self.registry.living():
            if player.is_bot:
                delay = bots.guess_delay_ms(self.confinement_duration_ms)
                self.bot_guesses.schedule(self.clock, player.player_id, delay,
                                          self.submit_bot_guess, player.player_id,
                                          self.current_round)

    def submit_bot_guess(self, player_id: str, round_number: int) -> Optional[Mark]:
        player = self.registry.get(player_id)
        if player is None or not player.alive or player.guess is not None:
            return None
        if self.phase != Phase.CONFINED or round_number != self.current_round:
            return None
        player.guess = bots.choose_guess()
        print(f"[session] Bot {player_id} submitted guess: {player.guess.value}")
        self.notifier.broadcast(MessageType.BOT_GUESS, {
            "id": player_id,
            "guess": player.guess.value,
        })
        return player.guess

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def evaluate_guesses(self, round_number: int) -> Optional[Outcome]:
        """Hard cutoff at the end of confinement.

        Returns the outcome, or None when this round was already evaluated.
        """
        if self.phase != Phase.CONFINED or round_number != self.current_round:
            print(f"[session] Ignoring stale evaluation for round {round_number}")
            return None
        self.phase = Phase.EVALUATED
        self.confinement_trigger.cancel()
        self.bot_guesses.cancel_all()
        print("[session] Evaluating guesses...")

        for player in self.registry.living():
            if player.guessed_correctly():
                if not player.is_bot:
                    self.notifier.unicast(player.player_id, MessageType.SURVIVED,
                                          {"message": SURVIVED_MESSAGE})
                continue
            player.eliminate()
            guessed = player.guess.value if player.guess else None
            print(f"[session] Player {player.player_id} eliminated. "
                  f"Correct mark: {player.mark.value}, guessed: {guessed}")
            if not player.is_bot:
                self.notifier.unicast(player.player_id, MessageType.ELIMINATED,
                                      {"reason": ELIMINATED_REASON})

        if self.registry.living_jack() is None:
            return self._end_game(Outcome.SURVIVORS_WIN, SURVIVORS_WIN_MESSAGE)

        alive = self.registry.living()
        if len(alive) == 2 and any(p.is_jack for p in alive):
            return self._end_game(Outcome.JACK_WINS, JACK_WINS_MESSAGE)

        self.current_round += 1
        self.start_round()
        return Outcome.CONTINUE

    def _end_game(self, outcome: Outcome, message: str) -> Outcome:
        self.in_progress = False
        self.phase = Phase.GAME_OVER
        self.outcome = outcome
        self.result_message = message
        self.round_trigger.cancel()
        self.confinement_trigger.cancel()
        self.bot_guesses.cancel_all()
        print(f"[session] Game over: {message}")
        self.notifier.broadcast(MessageType.GAME_OVER, {
            "message": message,
            "winner": outcome.value,
        })
        return outcome

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def snapshot(self, viewer_id: Optional[str] = None) -> dict:
        """All players keyed by id; the viewer's own mark stays hidden."""
        players = {}
        for player in self.registry.all():
            state = player.to_state()
            if player.player_id == viewer_id:
                state = state.hidden()
            players[player.player_id] = state.to_dict()
        return players
