import time

from merge2048.environments.game_env import Merge2048Env

env = Merge2048Env(render_mode="human")

print("Environment created.")
print(f"Action space: {env.action_space}")

print("\n--- STARTING RANDOM MOVES DEMO ---\n")
observation, info = env.reset()
terminated = False
truncated = False

total_reward = 0
step_count = 0

while not (terminated or truncated):

    # Picks random action
    action = env.action_space.sample()

    print(f"\n--- Step {step_count} ---")
    print(f"Action taken: {['Up', 'Right', 'Down', 'Left'][action]}")

    # performs the action in the environment
    observation, reward, terminated, truncated, info = env.step(action)

    print(f"Reward received: {reward}")
    total_reward += reward
    step_count += 1

    time.sleep(0.2)

env.close()

print("\n--- GAME FINISHED ---")
print(f"Total steps: {step_count}")
print(f"Total score: {total_reward}")
print(f"Max tile: {info['max_tile']}")
