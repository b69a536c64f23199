import numpy as np

# Each child link is this many times shorter than its parent
LENGTH_RATIO = 1.5


class PendulumLink:
    """One rigid segment of the chain with its own angular state."""

    def __init__(self, length, angle=0.0):
        self.length = float(length)
        self.angle = float(angle)
        self.angular_velocity = 0.0
        self.angular_acceleration = 0.0

    @property
    def end(self):
        """Local offset of the link end relative to its own origin (0, 0)"""
        return np.array([self.length * np.sin(self.angle),
                         self.length * np.cos(self.angle)])

    def step(self, heading, gravity, damping):
        """Advance the damped oscillator by one frame"""
        self.angular_acceleration = (-gravity / self.length) * np.sin(self.angle + heading)
        self.angle += self.angular_velocity
        self.angular_velocity += self.angular_acceleration
        self.angular_velocity *= damping

    def __repr__(self):
        return (f"PendulumLink(length={self.length:.2f}, angle={self.angle:.3f}, "
                f"angular_velocity={self.angular_velocity:.4f})")


class PendulumChain:
    """
    Open chain of pendulum links, root first.

    The links are kept as an ordered list where link k+1 hangs from the end
    of link k. Every link is driven by the same heading on each update, so
    the links swing independently while their ends are composed outward
    into one position.

    Parameters:
    amplitude - length of the root link
    joints - number of links in the chain
    angles - optional initial angles (one per link); random in [0, 2π) otherwise
    rng - numpy Generator used for the random initial angles
    """

    def __init__(self, amplitude, joints, angles=None, rng=None):
        if joints < 1:
            raise ValueError("joints must be at least 1")
        if amplitude <= 0:
            raise ValueError("amplitude must be positive")

        if angles is None:
            rng = rng if rng is not None else np.random.default_rng()
            angles = rng.uniform(0.0, 2 * np.pi, size=joints)
        elif len(angles) != joints:
            raise ValueError(f"expected {joints} angles, got {len(angles)}")

        self.links = [PendulumLink(amplitude / LENGTH_RATIO**k, angle)
                      for k, angle in enumerate(angles)]
        self.heading = 0.0

    @property
    def depth(self):
        return len(self.links) - 1

    @property
    def lengths(self):
        return np.array([link.length for link in self.links])

    @property
    def angles(self):
        return np.array([link.angle for link in self.links])

    @property
    def angular_velocities(self):
        return np.array([link.angular_velocity for link in self.links])

    def update(self, heading, gravity, damping):
        """Step every link with the same heading"""
        self.heading = heading
        for link in self.links:
            link.step(heading, gravity, damping)

    def joint_positions(self, offset=(0.0, 0.0)):
        """
        World positions of the root and of every link end, root first.

        Each link end is relative to the end of its parent, so the positions
        are a running sum of the local end offsets.
        """
        ends = np.array([link.end for link in self.links])
        positions = np.vstack([np.zeros(2), np.cumsum(ends, axis=0)])
        return positions + np.asarray(offset, dtype=float)

    def terminal_position(self, offset=(0.0, 0.0)):
        """World position of the deepest link end"""
        return self.joint_positions(offset)[-1]

    def energy(self, gravity):
        """Sum of the per-link oscillator energies at the last heading"""
        lengths = self.lengths
        omega = self.angular_velocities
        kinetic = 0.5 * (lengths * omega)**2
        potential = gravity * lengths * (1 - np.cos(self.angles + self.heading))
        return float(np.sum(kinetic + potential))
